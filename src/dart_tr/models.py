from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union


# =========================
# Scanner / Classifier Models
# =========================

@dataclass(frozen=True)
class LiteralSpan:
    """A quoted literal located in a buffer: [start, end) includes both quotes."""
    start: int
    end: int
    quote: str
    raw_value: str


class SkipReason(str, Enum):
    NONE = "none"
    IMPORT_LINE = "import_line"
    EMPTY_VALUE = "empty_value"
    CONTAINS_SLASH = "contains_slash"
    ALREADY_SUFFIXED = "already_suffixed"
    INSIDE_PRINT_OR_LOG = "inside_print_or_log"


@dataclass(frozen=True)
class ClassificationResult:
    span: LiteralSpan
    eligible: bool
    skip_reason: SkipReason = SkipReason.NONE


# =========================
# Rewrite Models
# =========================

@dataclass(frozen=True)
class CopyUntouched:
    start: int
    end: int


@dataclass(frozen=True)
class Substitute:
    span: LiteralSpan
    replacement: str

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end


Segment = Union[CopyUntouched, Substitute]


@dataclass(frozen=True)
class RewritePlan:
    """
    Segments covering [0, length) in order, no gaps, no overlaps.
    Construction fails loudly if that does not hold.
    """
    length: int
    segments: Tuple[Segment, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        pos = 0
        for seg in self.segments:
            if seg.start != pos or seg.end < seg.start:
                raise ValueError(f"rewrite plan broken at offset {pos}: {seg!r}")
            pos = seg.end
        if pos != self.length:
            raise ValueError(f"rewrite plan covers {pos} of {self.length} chars")

    @property
    def substitutions(self) -> Tuple[Substitute, ...]:
        return tuple(s for s in self.segments if isinstance(s, Substitute))


@dataclass(frozen=True)
class RewriteRules:
    """Everything the core needs to know about one run (built from config)."""
    required_import: str
    scanner: str = "regex"
    call_sites: Tuple[str, ...] = ("print", "log")
    terminator: str = ""
    escape_quotes: bool = False


@dataclass(frozen=True)
class RewriteOutcome:
    new_text: str
    substitutions: int = 0
    import_added: bool = False
    values: FrozenSet[str] = frozenset()
    results: Tuple[ClassificationResult, ...] = field(default_factory=tuple)

    @property
    def was_modified(self) -> bool:
        return self.substitutions > 0


# =========================
# Run Reporting Models
# =========================

@dataclass(frozen=True)
class FileResult:
    path: Path
    new_text: str = ""
    was_modified: bool = False
    import_added: bool = False
    substitution_count: int = 0
    values: FrozenSet[str] = frozenset()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunReport:
    files: Tuple[FileResult, ...] = field(default_factory=tuple)
    unique_strings: int = 0
    output_path: Optional[Path] = None
    output_error: Optional[str] = None
    dry_run: bool = False

    @property
    def files_changed(self) -> int:
        return sum(1 for f in self.files if f.ok and f.was_modified)

    @property
    def failed(self) -> Tuple[FileResult, ...]:
        return tuple(f for f in self.files if not f.ok)

    @property
    def substitutions(self) -> int:
        return sum(f.substitution_count for f in self.files if f.ok)

    @property
    def ok(self) -> bool:
        return not self.failed and self.output_error is None
