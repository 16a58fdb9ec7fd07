"""Command-line interface for mbase.

WHY: Most encoding questions come up at a terminal: "what is this
string?", "give me this as base58", "why won't this decode?". The CLI
puts the codec registry, the detection engine, explain and fmt behind
one ``mbase`` command with predictable flags and exit codes, so it also
works inside shell scripts.

HOW: argparse subcommands, one ``_cmd_*`` handler each. Handlers read
their input through mbase.streams (``-`` for stdin, ``@path`` for a
file, anything else is literal), call into the core, and write text or
``--json`` documents rendered from mbase.models. main() catches
MbaseError and OSError, prints ``Error: ...`` to stderr and exits with
the status mapped from the error type.

RULES:
- Exit codes: 0 ok, 1 general failure, 10 invalid input, 11 checksum
  mismatch, 12 I/O error, 13 unknown codec; the mapping lives here only
- Results go to stdout (or -o @path); status and errors go to stderr
- Encoded input loses trailing line terminators (echo, files) before
  decoding; other whitespace is left to the codec and --mode
- Decoded bytes that are not UTF-8 are shown as a hex dump on a
  terminal unless --force is given
- Defaults come from mbase.config (MBASE_* environment variables)
- Python 3.10 compatible: no match/case, no X | Y unions
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from mbase import __version__
from mbase.config import (
    DEFAULT_CODEC,
    DETECT_TOP,
    DETECT_WORKERS,
    LOG_LEVEL,
)
from mbase.core.detect import detect
from mbase.core.errors import (
    ChecksumMismatch,
    CodecNotFound,
    InvalidCharacter,
    InvalidInput,
    InvalidLength,
    IoError,
    MbaseError,
)
from mbase.core.explain import explain
from mbase.core.fmt import reformat
from mbase.core.registry import get_registry
from mbase.core.types import Mode
from mbase.models import (
    CodecList,
    CodecMetaModel,
    DecodeAll,
    DecodeResult,
    DetectCandidateModel,
    DetectResult,
    EncodeAll,
    EncodeResult,
    ExplainResult,
    VerifyResult,
    preview,
)
from mbase.streams import STDIO, hex_preview, read_input, read_text, write_output

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 10
EXIT_CHECKSUM = 11
EXIT_IO = 12
EXIT_UNKNOWN_CODEC = 13


def exit_code_for(error: BaseException) -> int:
    """Map an error to the process exit status."""
    if isinstance(error, ChecksumMismatch):
        return EXIT_CHECKSUM
    if isinstance(error, (IoError, OSError)):
        return EXIT_IO
    if isinstance(error, CodecNotFound):
        return EXIT_UNKNOWN_CODEC
    if isinstance(error, (InvalidInput, InvalidCharacter, InvalidLength)):
        return EXIT_INVALID_INPUT
    return EXIT_FAILURE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _source(args: argparse.Namespace) -> str:
    """Input spec: the positional literal if given, else -i/--in."""
    if args.text is not None:
        return args.text
    return args.input


def _read_encoded(args: argparse.Namespace) -> str:
    """Read encoded text, dropping the trailing newline echo and editors add."""
    return read_text(_source(args)).rstrip("\r\n")


def _emit_text(spec: str, text: str) -> None:
    """Write a text result; stdout gets a trailing newline."""
    if spec == STDIO:
        text += "\n"
    write_output(spec, text.encode("utf-8"))


def _emit_bytes(args: argparse.Namespace, data: bytes) -> None:
    """Write decoded bytes, guarding terminals against raw binary."""
    if args.out != STDIO:
        write_output(args.out, data)
        return
    if not sys.stdout.isatty():
        write_output(args.out, data)
        return
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        if args.force:
            write_output(args.out, data)
            return
        _status("Output is binary; showing a hex preview (use --force or -o @file).")
        _emit_text(args.out, hex_preview(data))
        return
    _emit_text(args.out, text)


def _printable(text: str) -> str:
    """Escape control characters so an alphabet can be shown on one line."""
    return "".join(
        c if c.isprintable() else "\\x{:02x}".format(ord(c)) for c in text
    )


def _mode(args: argparse.Namespace) -> Mode:
    return Mode(args.mode)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_enc(args: argparse.Namespace) -> int:
    registry = get_registry()
    data = read_input(_source(args))

    if args.all:
        results = []
        for codec in registry.codecs:
            code = codec.meta().multibase_code if args.multibase else None
            results.append(EncodeResult(
                codec=codec.name,
                multibase=bool(code),
                output=(code or "") + codec.encode(data),
            ))
        if args.json:
            doc = EncodeAll(input_bytes=len(data), results=results)
            _emit_text(args.out, doc.model_dump_json(indent=2))
        else:
            width = max(len(r.codec) for r in results)
            _emit_text(args.out, "\n".join(
                "{:<{}}  {}".format(r.codec, width, r.output) for r in results
            ))
        return EXIT_OK

    codec = registry.get(args.codec)
    output = codec.encode(data)
    if args.multibase:
        code = codec.meta().multibase_code
        if code is None:
            raise InvalidInput("{} has no multibase code".format(codec.name))
        output = code + output

    if args.json:
        result = EncodeResult(codec=codec.name, multibase=args.multibase, output=output)
        _emit_text(args.out, result.model_dump_json(indent=2))
    else:
        _emit_text(args.out, output)
    return EXIT_OK


def _cmd_dec(args: argparse.Namespace) -> int:
    registry = get_registry()
    text = _read_encoded(args)
    mode = _mode(args)

    if args.all and not args.multibase:
        results = []
        for codec in registry.codecs:
            try:
                data = codec.decode(text, mode)
            except MbaseError:
                continue
            results.append(DecodeResult.from_bytes(codec.name, data))
        if args.json:
            doc = DecodeAll(input_preview=preview(text), results=results)
            _emit_text(args.out, doc.model_dump_json(indent=2))
        elif results:
            width = max(len(r.codec) for r in results)
            _emit_text(args.out, "\n".join(
                "{:<{}}  {}".format(
                    r.codec, width, r.text if r.text is not None else "hex:" + (r.hex or "")
                )
                for r in results
            ))
        else:
            _status("No codec decodes this input.")
            return EXIT_INVALID_INPUT
        return EXIT_OK

    codec = registry.by_multibase(text[:1]) if args.multibase and text else None
    if codec is not None:
        logger.debug("Multibase prefix %r selects %s", text[0], codec.name)
        text = text[1:]
    else:
        codec = registry.get(args.codec)

    data = codec.decode(text, mode)
    if args.json:
        result = DecodeResult.from_bytes(codec.name, data)
        _emit_text(args.out, result.model_dump_json(indent=2))
    else:
        _emit_bytes(args, data)
    return EXIT_OK


def _cmd_conv(args: argparse.Namespace) -> int:
    registry = get_registry()
    source = registry.get(args.from_codec)
    target = registry.get(args.to_codec)
    data = source.decode(_read_encoded(args), _mode(args))
    _emit_text(args.out, target.encode(data))
    return EXIT_OK


def _cmd_list(args: argparse.Namespace) -> int:
    metas = get_registry().list()
    if args.json:
        doc = CodecList(
            count=len(metas),
            codecs=[CodecMetaModel.from_meta(m) for m in metas],
        )
        _emit_text(args.out, doc.model_dump_json(indent=2))
        return EXIT_OK

    width = max(len(m.name) for m in metas)
    lines = []
    for meta in metas:
        lines.append("{:<{}}  {:<2} {}".format(
            meta.name,
            width,
            meta.multibase_code or "-",
            ", ".join(meta.aliases),
        ))
    _emit_text(args.out, "\n".join(lines))
    return EXIT_OK


def _cmd_info(args: argparse.Namespace) -> int:
    meta = get_registry().get(args.codec_name).meta()
    if args.json:
        _emit_text(args.out, CodecMetaModel.from_meta(meta).model_dump_json(indent=2))
        return EXIT_OK

    lines = [
        "name:             {}".format(meta.name),
        "aliases:          {}".format(", ".join(meta.aliases) or "-"),
        "description:      {}".format(meta.description),
        "multibase code:   {}".format(meta.multibase_code or "-"),
        "padding:          {}".format(meta.padding.value),
        "case sensitivity: {}".format(meta.case_sensitivity.value),
        "alphabet:         {} ({} symbols)".format(
            preview(_printable(meta.alphabet), 80), len(meta.alphabet)
        ),
    ]
    _emit_text(args.out, "\n".join(lines))
    return EXIT_OK


def _cmd_verify(args: argparse.Namespace) -> int:
    codec = get_registry().get(args.codec)
    text = _read_encoded(args)
    error: Optional[MbaseError] = None
    try:
        codec.validate(text, _mode(args))
    except MbaseError as exc:
        error = exc

    if args.json:
        result = VerifyResult(
            codec=codec.name,
            valid=error is None,
            error=str(error) if error else None,
        )
        _emit_text(args.out, result.model_dump_json(indent=2))
    elif error is None:
        _emit_text(args.out, "valid")
    else:
        _emit_text(args.out, "invalid: {}".format(error))
    return EXIT_OK if error is None else exit_code_for(error)


def _cmd_fmt(args: argparse.Namespace) -> int:
    codec = get_registry().get(args.codec)
    text = _read_encoded(args)
    output = reformat(
        codec,
        text,
        mode=_mode(args),
        group_size=args.group,
        wrap_width=args.wrap,
        separator=args.sep,
    )
    _emit_text(args.out, output)
    return EXIT_OK


def _cmd_detect(args: argparse.Namespace) -> int:
    text = read_text(_source(args))
    candidates = detect(
        text,
        registry=get_registry(),
        top=args.top or None,
        workers=max(1, args.workers),
        include_zero=args.include_zero,
    )

    if args.json:
        doc = DetectResult(
            input_preview=preview(text.strip()),
            candidates=[DetectCandidateModel.from_candidate(c) for c in candidates],
        )
        _emit_text(args.out, doc.model_dump_json(indent=2))
        return EXIT_OK

    if not candidates:
        _status("No likely encodings found.")
        return EXIT_OK

    width = max(len(c.codec) for c in candidates)
    lines = []
    for rank, candidate in enumerate(candidates, start=1):
        lines.append("{:>2}. {:<{}}  {:.2f}  {}".format(
            rank,
            candidate.codec,
            width,
            candidate.confidence,
            "; ".join(candidate.reasons),
        ))
        for warning in candidate.warnings:
            lines.append("    ! {}".format(warning))
    _emit_text(args.out, "\n".join(lines))
    return EXIT_OK


def _cmd_explain(args: argparse.Namespace) -> int:
    codec = get_registry().get(args.codec)
    text = read_text(_source(args))
    report = explain(codec, text, _mode(args), registry=get_registry())

    if args.json:
        _emit_text(args.out, ExplainResult.from_report(report, text).model_dump_json(indent=2))
        return EXIT_OK

    lines = ["codec: {}".format(report.codec)]
    if report.valid:
        lines.append("valid: yes")
    else:
        lines.append("valid: no")
        lines.append("error: {}".format(report.message))
        if report.context is not None:
            lines.extend("  " + line for line in report.context.split("\n"))
        if report.suggestions:
            lines.append("suggestions:")
            lines.extend("  - {}".format(s) for s in report.suggestions)
    _emit_text(args.out, "\n".join(lines))
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_io(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "text",
        nargs="?",
        default=None,
        help="Literal input (shorthand for -i TEXT).",
    )
    sub.add_argument(
        "-i", "--in",
        dest="input",
        default=STDIO,
        help="Input: '-' for stdin, '@path' for a file, otherwise literal text "
             "(default: %(default)s).",
    )
    sub.add_argument(
        "-o", "--out",
        dest="out",
        default=STDIO,
        help="Output: '-' for stdout, '@path' or a plain path for a file "
             "(default: %(default)s).",
    )


def _add_codec(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "-c", "--codec",
        default=DEFAULT_CODEC,
        help="Codec name or alias (default: %(default)s).",
    )


def _add_mode(sub: argparse.ArgumentParser, default: Mode = Mode.STRICT) -> None:
    sub.add_argument(
        "-m", "--mode",
        choices=[m.value for m in Mode],
        default=default.value,
        help="Decoding mode (default: %(default)s).",
    )


def _add_json(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--json", action="store_true", help="Emit a JSON document.")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() lets tests inspect
    defaults and choices without running a command.

    RULES:
    - One subparser per command, each with ``handler`` set to its _cmd_*
    - Shared flags (-i/-o, --codec, --mode, --json) come from _add_* helpers
    """
    parser = argparse.ArgumentParser(
        prog="mbase",
        description="Encode, decode, convert and identify text encodings "
                    "(base64, base58, bech32, morse, rot13 and more).",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    enc = subparsers.add_parser("enc", help="Encode bytes to text.")
    _add_io(enc)
    _add_codec(enc)
    enc.add_argument("--multibase", action="store_true", help="Prepend the multibase prefix.")
    enc.add_argument("--all", action="store_true", help="Encode with every codec.")
    _add_json(enc)
    enc.set_defaults(handler=_cmd_enc)

    dec = subparsers.add_parser("dec", help="Decode text to bytes.")
    _add_io(dec)
    _add_codec(dec)
    _add_mode(dec)
    dec.add_argument(
        "--multibase",
        action="store_true",
        help="Pick the codec from the input's multibase prefix.",
    )
    dec.add_argument("--all", action="store_true", help="Try every codec, list successes.")
    dec.add_argument(
        "-f", "--force",
        action="store_true",
        help="Write binary output to a terminal instead of a hex preview.",
    )
    _add_json(dec)
    dec.set_defaults(handler=_cmd_dec)

    conv = subparsers.add_parser("conv", help="Convert text from one codec to another.")
    _add_io(conv)
    conv.add_argument("--from", dest="from_codec", required=True, help="Source codec.")
    conv.add_argument("--to", dest="to_codec", required=True, help="Target codec.")
    _add_mode(conv)
    conv.set_defaults(handler=_cmd_conv)

    lst = subparsers.add_parser("list", help="List available codecs.")
    lst.add_argument("-o", "--out", dest="out", default=STDIO, help="Output destination.")
    _add_json(lst)
    lst.set_defaults(handler=_cmd_list)

    info = subparsers.add_parser("info", help="Show codec metadata.")
    info.add_argument("codec_name", help="Codec name or alias.")
    info.add_argument("-o", "--out", dest="out", default=STDIO, help="Output destination.")
    _add_json(info)
    info.set_defaults(handler=_cmd_info)

    verify = subparsers.add_parser("verify", help="Check that input conforms to a codec.")
    _add_io(verify)
    _add_codec(verify)
    _add_mode(verify)
    _add_json(verify)
    verify.set_defaults(handler=_cmd_verify)

    fmt = subparsers.add_parser("fmt", help="Canonicalize and lay out encoded text.")
    _add_io(fmt)
    _add_codec(fmt)
    _add_mode(fmt, default=Mode.LENIENT)
    fmt.add_argument("--group", type=int, default=None, help="Insert a separator every N characters.")
    fmt.add_argument("--wrap", type=int, default=None, help="Wrap lines at N characters.")
    fmt.add_argument("--sep", default=" ", help="Group separator (default: space).")
    fmt.set_defaults(handler=_cmd_fmt)

    det = subparsers.add_parser("detect", help="Guess which codec produced the input.")
    _add_io(det)
    det.add_argument(
        "--top",
        type=int,
        default=DETECT_TOP,
        help="Show at most N candidates, 0 for all (default: %(default)s).",
    )
    det.add_argument(
        "--workers",
        type=int,
        default=DETECT_WORKERS,
        help="Threads used for scoring (default: %(default)s).",
    )
    det.add_argument(
        "--include-zero",
        action="store_true",
        help="Also list codecs with zero confidence.",
    )
    _add_json(det)
    det.set_defaults(handler=_cmd_detect)

    exp = subparsers.add_parser("explain", help="Explain why input does not decode.")
    _add_io(exp)
    _add_codec(exp)
    _add_mode(exp)
    _add_json(exp)
    exp.set_defaults(handler=_cmd_explain)

    return parser


def _configure_logging(verbose: bool) -> None:
    level = getattr(logging, LOG_LEVEL, None)
    if not isinstance(level, int):
        level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``mbase`` command and ``python -m mbase``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Returns normally on success; any other outcome is sys.exit(code)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        sys.exit(EXIT_FAILURE)

    try:
        code = handler(args)
    except MbaseError as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        sys.exit(exit_code_for(exc))
    except OSError as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        sys.exit(EXIT_IO)

    if code != EXIT_OK:
        sys.exit(code)


if __name__ == "__main__":
    main()
