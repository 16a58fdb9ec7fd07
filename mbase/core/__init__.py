"""Core contract, registry, and detection modules.

WHY: The core package is the stable heart of mbase — the shared types,
the error taxonomy, the normalization rules every codec follows, and the
machinery (registry, detection engine) that works with any codec
generically.

HOW: types.py and errors.py define the data structures, alphabet.py
handles mode normalization and alphabet checks, scoring.py holds the
confidence policy, registry.py catalogs codecs, detect.py ranks them.
explain.py and fmt.py build diagnostics and reformatting on top.

RULES:
- Nothing in core reads files, stdin, or the environment
- Codec-specific logic lives in mbase.codecs, never here
- Types are the contract; change with care
"""
