"""Pydantic models for every JSON document the CLI emits.

WHY: Scripts consume ``mbase ... --json`` output, so its shape is an
interface. Declaring it as pydantic models gives one typed definition
per document, runtime validation of what we emit, and a JSON Schema we
can compare against the checked-in files under schemas/.

HOW: Each command with --json output has a result model. Core values
(CodecMeta, DetectCandidate, ExplainReport) are converted with
``from_*`` classmethods so the core never imports pydantic. The CLI
renders with ``model_dump_json(indent=2)``.

RULES:
- All models use Field(description=...)
- Enum values render as their lowercase string values
- Report documents (detect, explain, verify) carry schema_version
- Python 3.10+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from mbase.config import PREVIEW_CHARS, SCHEMA_VERSION
from mbase.core.explain import ExplainReport
from mbase.core.types import CaseSensitivity, CodecMeta, DetectCandidate, PaddingRule


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """Shorten ``text`` to ``limit`` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


# ---------------------------------------------------------------------------
# Codec metadata
# ---------------------------------------------------------------------------


class CodecMetaModel(BaseModel):
    """Serialized CodecMeta, as printed by ``list --json`` and ``info --json``."""

    name: str = Field(description="Canonical codec name.")
    aliases: List[str] = Field(description="Alternate names accepted by --codec.")
    alphabet: str = Field(description="Symbols the encoded output is drawn from.")
    multibase_code: Optional[str] = Field(
        default=None,
        description="Single-character multibase prefix, or null.",
    )
    padding: PaddingRule = Field(description="Padding rule: none, required or optional.")
    case_sensitivity: CaseSensitivity = Field(
        description="Whether letter case is significant: sensitive or insensitive.",
    )
    description: str = Field(description="One-line human description.")

    @classmethod
    def from_meta(cls, meta: CodecMeta) -> "CodecMetaModel":
        return cls(**meta.to_dict())


class CodecList(BaseModel):
    """Output of ``mbase list --json``."""

    count: int = Field(description="Number of registered codecs.")
    codecs: List[CodecMetaModel] = Field(description="Codecs in declaration order.")


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


class DetectCandidateModel(BaseModel):
    """One ranked guess from the detection engine."""

    codec: str = Field(description="Canonical codec name.")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence in [0, 1].")
    reasons: List[str] = Field(description="Signals that raised confidence, in rule order.")
    warnings: List[str] = Field(description="Caveats that did not raise confidence.")

    @classmethod
    def from_candidate(cls, candidate: DetectCandidate) -> "DetectCandidateModel":
        return cls(**candidate.to_dict())


class DetectResult(BaseModel):
    """Output of ``mbase detect --json``."""

    schema_version: int = Field(default=SCHEMA_VERSION, description="Document version.")
    input_preview: str = Field(description="Leading characters of the analyzed input.")
    candidates: List[DetectCandidateModel] = Field(
        description="Candidates sorted by confidence, highest first.",
    )


# ---------------------------------------------------------------------------
# Encode / decode
# ---------------------------------------------------------------------------


class EncodeResult(BaseModel):
    """One codec's encoding of the input bytes."""

    codec: str = Field(description="Canonical codec name.")
    multibase: bool = Field(default=False, description="True if a multibase prefix was prepended.")
    output: str = Field(description="Encoded text.")


class EncodeAll(BaseModel):
    """Output of ``mbase enc --all --json``."""

    input_bytes: int = Field(description="Length of the encoded input in bytes.")
    results: List[EncodeResult] = Field(description="One entry per codec, declaration order.")


class DecodeResult(BaseModel):
    """One codec's attempt to decode the input text.

    RULES:
    - ok=True: length and hex are set, text is set if the bytes are UTF-8
    - ok=False: error is set, everything else is null
    """

    codec: str = Field(description="Canonical codec name.")
    ok: bool = Field(description="True if the input decoded under this codec.")
    length: Optional[int] = Field(default=None, description="Decoded length in bytes.")
    hex: Optional[str] = Field(default=None, description="Decoded bytes as lowercase hex.")
    text: Optional[str] = Field(
        default=None,
        description="Decoded bytes as UTF-8 text, when they are valid UTF-8.",
    )
    error: Optional[str] = Field(default=None, description="Decode error message.")

    @classmethod
    def from_bytes(cls, codec: str, data: bytes) -> "DecodeResult":
        try:
            text: Optional[str] = data.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        return cls(codec=codec, ok=True, length=len(data), hex=data.hex(), text=text)


class DecodeAll(BaseModel):
    """Output of ``mbase dec --all --json``."""

    input_preview: str = Field(description="Leading characters of the decoded input.")
    results: List[DecodeResult] = Field(
        description="Successful decodes only, declaration order.",
    )


# ---------------------------------------------------------------------------
# Verify / explain
# ---------------------------------------------------------------------------


class VerifyResult(BaseModel):
    """Output of ``mbase verify --json``."""

    schema_version: int = Field(default=SCHEMA_VERSION, description="Document version.")
    codec: str = Field(description="Canonical codec name.")
    valid: bool = Field(description="True if the input conforms to the codec.")
    error: Optional[str] = Field(default=None, description="Validation error message.")


class ExplainError(BaseModel):
    """Structured decode failure inside an explain report."""

    type: str = Field(description="Error class, e.g. InvalidCharacter.")
    message: str = Field(description="Human-readable error message.")
    position: Optional[int] = Field(
        default=None,
        description="Offending index in the normalized input (invalid characters only).",
    )
    offending_char: Optional[str] = Field(
        default=None,
        description="The offending character (invalid characters only).",
    )
    context: Optional[str] = Field(
        default=None,
        description="Input excerpt and caret line marking the position.",
    )


class ExplainResult(BaseModel):
    """Output of ``mbase explain --json``."""

    schema_version: int = Field(default=SCHEMA_VERSION, description="Document version.")
    codec: str = Field(description="Canonical codec name.")
    input_preview: str = Field(description="Leading characters of the explained input.")
    valid: bool = Field(description="True if the input decodes.")
    error: Optional[ExplainError] = Field(default=None, description="Failure details.")
    suggestions: List[str] = Field(description="Hints for fixing the input.")

    @classmethod
    def from_report(cls, report: ExplainReport, text: str) -> "ExplainResult":
        error = None
        if not report.valid:
            error = ExplainError(
                type=report.error_type or "MbaseError",
                message=report.message or "",
                position=report.position,
                offending_char=report.offending_char,
                context=report.context,
            )
        return cls(
            codec=report.codec,
            input_preview=preview(text.strip()),
            valid=report.valid,
            error=error,
            suggestions=list(report.suggestions),
        )
