"""mbase — universal text encoding toolkit.

WHY: Binary data travels through text channels in dozens of encodings
(base64, hex, base58 addresses, bech32, uuencode, morse, ...). Each has
its own library, flags, and failure modes. This package puts all of them
behind one codec contract, one registry, and one detection engine that
guesses which encoding an unlabeled string uses.

HOW: Three layers — codecs (one small class per encoding variant), the
registry (immutable catalog, indexed by name and alias), and the
detection engine (runs every codec's scorer and ranks the results).
The CLI and JSON models sit on top and are the only parts that touch
files, stdin/stdout, or environment variables.

RULES:
- Every codec implements mbase.codecs.base.BaseCodec
- Adding an encoding = one new codec class + one entry in CODECS
- encode() is total; decode() raises structured MbaseError subclasses
- The core never reads files, env vars, or CLI flags
"""

__version__ = "0.1.0"
