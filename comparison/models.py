"""Shared data models for page alignment."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Literal, Optional, Sequence, Union

if TYPE_CHECKING:
    from PIL import Image


MAX_TOLERANCE = 5


@dataclass(frozen=True)
class Page:
    index: int
    image: "Image.Image"
    text: str = ""


@dataclass
class Document:
    """An ordered, index-stable sequence of pages from one file."""

    name: str
    pages: List[Page] = field(default_factory=list)

    def __post_init__(self) -> None:
        for position, page in enumerate(self.pages):
            if page.index != position:
                raise ValueError(
                    f"Document {self.name!r}: page at position {position} has index {page.index}"
                )

    def __len__(self) -> int:
        return len(self.pages)

    def __getitem__(self, idx: int) -> Page:
        return self.pages[idx]

    def __iter__(self) -> Iterator[Page]:
        return iter(self.pages)


@dataclass(frozen=True)
class AlignmentSettings:
    """Immutable settings for one comparison run."""

    pixel_threshold: float = 0.1
    include_antialiasing: bool = False
    tolerance: int = 2
    scanned_mode: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.tolerance, bool) or not isinstance(self.tolerance, int):
            raise ValueError(f"tolerance must be an integer, got {self.tolerance!r}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be between 0 and {MAX_TOLERANCE}, got {self.tolerance}")
        if not 0.0 <= float(self.pixel_threshold) <= 1.0:
            raise ValueError(f"pixel_threshold must be between 0.0 and 1.0, got {self.pixel_threshold}")

    @property
    def effective_tolerance(self) -> int:
        """Tolerance clamped to the supported range."""
        return min(self.tolerance, MAX_TOLERANCE)

    @classmethod
    def from_settings(cls, **overrides) -> "AlignmentSettings":
        """Build run settings from the application configuration, applying overrides."""
        from config.settings import settings

        values = {
            "pixel_threshold": settings.alignment_pixel_threshold,
            "include_antialiasing": settings.alignment_include_antialiasing,
            "tolerance": settings.alignment_tolerance,
            "scanned_mode": settings.alignment_scanned_mode,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "pixel_threshold": self.pixel_threshold,
            "include_antialiasing": self.include_antialiasing,
            "tolerance": self.tolerance,
            "scanned_mode": self.scanned_mode,
        }


@dataclass(frozen=True)
class AlignmentParams:
    """Parameters derived from the tolerance; reported back for diagnostics."""

    max_consecutive_gaps: int
    gap_penalty: float
    bad_match_cutoff: float
    bad_match_penalty: float

    def to_dict(self) -> dict:
        return {
            "max_consecutive_gaps": self.max_consecutive_gaps,
            # JSON has no infinity
            "gap_penalty": None if self.gap_penalty == float("inf") else self.gap_penalty,
            "bad_match_cutoff": self.bad_match_cutoff,
            "bad_match_penalty": self.bad_match_penalty,
        }


StepKind = Literal["match", "delete", "insert"]


@dataclass(frozen=True)
class Match:
    a_index: int
    b_index: int
    cost: float
    kind: StepKind = field(default="match", init=False)

    @property
    def similarity(self) -> float:
        """Similarity percentage for display (100 = identical content band)."""
        return max(0.0, 100.0 - self.cost * 100.0)

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "a_index": self.a_index,
            "b_index": self.b_index,
            "cost": self.cost,
            "similarity": round(self.similarity, 2),
        }


@dataclass(frozen=True)
class DeleteA:
    """A page present only in document A."""

    a_index: int
    kind: StepKind = field(default="delete", init=False)

    def to_dict(self) -> dict:
        return {"type": self.kind, "a_index": self.a_index}


@dataclass(frozen=True)
class InsertB:
    """A page present only in document B."""

    b_index: int
    kind: StepKind = field(default="insert", init=False)

    def to_dict(self) -> dict:
        return {"type": self.kind, "b_index": self.b_index}


AlignmentStep = Union[Match, DeleteA, InsertB]


@dataclass
class EditScript:
    steps: List[AlignmentStep] = field(default_factory=list)

    def __iter__(self) -> Iterator[AlignmentStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, idx: int) -> AlignmentStep:
        return self.steps[idx]

    @property
    def matches(self) -> List[Match]:
        return [step for step in self.steps if isinstance(step, Match)]

    @property
    def deletions(self) -> List[DeleteA]:
        return [step for step in self.steps if isinstance(step, DeleteA)]

    @property
    def insertions(self) -> List[InsertB]:
        return [step for step in self.steps if isinstance(step, InsertB)]

    def summary(self) -> Dict[str, int]:
        return {
            "matches": len(self.matches),
            "deletions": len(self.deletions),
            "insertions": len(self.insertions),
        }

    def to_dict(self) -> List[dict]:
        return [step.to_dict() for step in self.steps]


@dataclass
class AlignmentResult:
    edit_script: EditScript
    params: AlignmentParams
    evaluated_pairs: int = 0


@dataclass
class ComparisonResult:
    """Everything a report needs from one comparison run."""

    doc_a: Document
    doc_b: Document
    settings: AlignmentSettings
    alignment: AlignmentResult
    render_scale: Optional[float] = None

    @property
    def steps(self) -> Sequence[AlignmentStep]:
        return self.alignment.edit_script.steps
