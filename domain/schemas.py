"""Pydantic models for the equipment-type taxonomy and classifier outputs."""

import math
from collections.abc import Mapping
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PATH_SEPARATOR = " → "
GAP_MARKER = "?"
UNAVAILABLE_REASONING = "AI detection service unavailable"
NO_REASONING = "No reasoning provided"


class HierarchyLevel(IntEnum):
    """The four fixed levels of the equipment taxonomy."""

    DOMAIN = 1
    TYPE = 2
    CATEGORY = 3
    SUBCATEGORY = 4

    @property
    def field_name(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: "HierarchyLevel | int | str") -> "HierarchyLevel":
        """Accept a level as enum, integer (1-4) or field name ('domain', 'type', ...)."""
        if isinstance(value, HierarchyLevel):
            return value
        if isinstance(value, str) and not value.strip().isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError as e:
                raise ValueError(f"Unknown hierarchy level: {value!r}") from e
        return cls(int(value))


LEVEL_FIELDS: tuple[str, ...] = tuple(level.field_name for level in HierarchyLevel)


class EquipmentTypeNode(BaseModel):
    """One taxonomy entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(..., min_length=2, max_length=100)
    level: int = Field(..., ge=1, le=4)
    parent_id: str | None = None

    @model_validator(mode="after")
    def _check_parent(self) -> "EquipmentTypeNode":
        if self.level == 1 and self.parent_id is not None:
            raise ValueError(f"Level-1 node {self.id!r} must not have a parent")
        if self.level > 1 and self.parent_id is None:
            raise ValueError(f"Level-{self.level} node {self.id!r} requires a parent")
        return self


class HierarchyPath(BaseModel):
    """A (possibly partial) domain -> subcategory path of names."""

    domain: str | None = None
    type: str | None = None
    category: str | None = None
    subcategory: str | None = None

    @classmethod
    def from_names(cls, names: list[str]) -> "HierarchyPath":
        if len(names) > len(LEVEL_FIELDS):
            raise ValueError(f"A hierarchy path has at most {len(LEVEL_FIELDS)} levels, got {len(names)}")
        return cls(**dict(zip(LEVEL_FIELDS, names)))

    def get(self, level: HierarchyLevel) -> str | None:
        return getattr(self, level.field_name)

    def as_list(self) -> list[str]:
        return [v for v in (self.domain, self.type, self.category, self.subcategory) if v]

    def deepest_level(self) -> HierarchyLevel | None:
        deepest = None
        for level in HierarchyLevel:
            if self.get(level):
                deepest = level
        return deepest

    def display(self) -> str:
        """Names joined by the path separator; unset levels above the deepest one render as '?'."""
        deepest = self.deepest_level()
        if deepest is None:
            return ""
        return PATH_SEPARATOR.join(self.get(level) or GAP_MARKER for level in HierarchyLevel if level <= deepest)


def _clean_label(value: Any) -> str | None:
    # non-string labels cannot name a node; the validator drops them
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s or s.lower() in {"null", "none", "n/a"}:
        return None
    return s


def _coerce_confidence(value: Any) -> float:
    """Best-effort float; anything unusable becomes 0.0. Not range-checked."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    return f if math.isfinite(f) else 0.0


class ClassificationCandidate(BaseModel):
    """Unverified classification proposed by the external classifier."""

    model_config = ConfigDict(extra="ignore")

    domain: str | None = None
    type: str | None = None
    category: str | None = None
    subcategory: str | None = None
    confidence: float = 0.0
    level_confidence: dict[str, float] = Field(
        default_factory=dict,
        description="Optional per-level confidence keyed by level name (domain/type/category/subcategory).",
    )
    reasoning: str = NO_REASONING

    @field_validator("domain", "type", "category", "subcategory", mode="before")
    @classmethod
    def _labels(cls, v: Any) -> str | None:
        return _clean_label(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v: Any) -> float:
        return _coerce_confidence(v)

    @field_validator("level_confidence", mode="before")
    @classmethod
    def _level_confidence(cls, v: Any) -> dict[str, float]:
        if not isinstance(v, Mapping):
            return {}
        out: dict[str, float] = {}
        for k, c in v.items():
            key = str(k).strip().lower()
            if key in LEVEL_FIELDS:
                out[key] = _coerce_confidence(c)
        return out

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning(cls, v: Any) -> str:
        if v is None:
            return NO_REASONING
        s = v if isinstance(v, str) else str(v)
        return s if s.strip() else NO_REASONING

    @property
    def path(self) -> HierarchyPath:
        return HierarchyPath(domain=self.domain, type=self.type, category=self.category, subcategory=self.subcategory)


class VerificationStatus(str, Enum):
    """How much of a candidate survived validation."""

    VERIFIED = "verified"
    PARTIALLY_VERIFIED = "partially_verified"
    UNVERIFIABLE = "unverifiable"


class ValidatedClassification(BaseModel):
    """
    Candidate fields proven consistent with the tree.

    Every non-null field names an existing node whose ancestor chain matches every
    other accepted field. Fields that could not be proven are None.
    """

    domain: str | None = None
    type: str | None = None
    category: str | None = None
    subcategory: str | None = None
    confidence: float = 0.0
    level_confidence: dict[str, float] = Field(default_factory=dict)
    reasoning: str = NO_REASONING
    proposed_depth: int = Field(
        default=0,
        ge=0,
        le=4,
        description="Deepest level the candidate supplied a value for (0 when it supplied none).",
    )

    @property
    def path(self) -> HierarchyPath:
        return HierarchyPath(domain=self.domain, type=self.type, category=self.category, subcategory=self.subcategory)

    @property
    def depth(self) -> int:
        return len(self.path.as_list())

    @property
    def status(self) -> VerificationStatus:
        if self.depth == 0:
            return VerificationStatus.UNVERIFIABLE
        if self.depth < self.proposed_depth:
            return VerificationStatus.PARTIALLY_VERIFIED
        return VerificationStatus.VERIFIED


class EquipmentDetails(BaseModel):
    """Free-text equipment description submitted for classification."""

    name: str
    brand: str = ""
    model: str = ""
    description: str | None = None

    def text(self) -> str:
        return f"{self.name} {self.brand} {self.model} {self.description or ''}"


class DetectionResult(BaseModel):
    """Outcome of one classification request, after validation and id resolution."""

    classification: ValidatedClassification
    node_id: str | None = None
    status: VerificationStatus = VerificationStatus.UNVERIFIABLE
    available: bool = True
    keywords: list[str] = Field(default_factory=list)
    usage: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def unavailable(cls, keywords: list[str] | None = None) -> "DetectionResult":
        return cls(
            classification=ValidatedClassification(confidence=0.0, reasoning=UNAVAILABLE_REASONING),
            available=False,
            keywords=list(keywords or []),
        )
