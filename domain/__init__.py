"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for nodes, paths and classifications
- errors: NotFoundError, ParseError, InvalidSelectionError
- taxonomy: Tree, summary, keyword filter, validator and cascade selection
"""

from domain.errors import InvalidSelectionError, NotFoundError, ParseError
from domain.schemas import (
    ClassificationCandidate,
    DetectionResult,
    EquipmentDetails,
    EquipmentTypeNode,
    HierarchyLevel,
    HierarchyPath,
    ValidatedClassification,
    VerificationStatus,
)

__all__ = [
    "EquipmentTypeNode",
    "HierarchyLevel",
    "HierarchyPath",
    "ClassificationCandidate",
    "ValidatedClassification",
    "VerificationStatus",
    "EquipmentDetails",
    "DetectionResult",
    "NotFoundError",
    "ParseError",
    "InvalidSelectionError",
]
