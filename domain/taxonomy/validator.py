"""Parse and validate untrusted classifier output against the authoritative tree."""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from domain.errors import ParseError
from domain.schemas import ClassificationCandidate, HierarchyLevel, ValidatedClassification
from domain.taxonomy.tree import TypeTree

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def parse_candidate(raw: str | bytes | Mapping[str, Any] | ClassificationCandidate) -> ClassificationCandidate:
    """
    Parse a classifier response into a ClassificationCandidate.

    Text responses may carry prose around the JSON object; the outermost
    ``{...}`` span is extracted first. Fields of unexpected types do not fail
    the parse: labels become None, confidence becomes 0.0, reasoning is stringified.

    Raises:
        ParseError: If no JSON object can be extracted or the payload is not an object
    """
    if isinstance(raw, ClassificationCandidate):
        return raw

    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")

    if isinstance(raw, str):
        match = _JSON_OBJECT_RE.search(raw)
        if not match:
            raise ParseError("No JSON object found in classifier response")
        try:
            payload: Any = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in classifier response: {e.msg}") from e
    else:
        payload = raw

    if not isinstance(payload, Mapping):
        raise ParseError(f"Classifier response must be a JSON object, got {type(payload).__name__}")

    try:
        return ClassificationCandidate.model_validate(dict(payload))
    except ValidationError as e:
        raise ParseError(f"Classifier response has invalid fields: {e.error_count()} error(s)") from e


class ClassificationValidator:
    """
    Top-down validator: level k is accepted only when level k-1 was.

    A field is accepted when it names a node at exactly that level whose parent
    is one of the nodes accepted at the previous level. The first level that
    fails (or is missing) ends validation; deeper fields are dropped even if
    their names exist elsewhere in the tree.
    """

    def __init__(self, tree: TypeTree) -> None:
        self.tree = tree

    def validate(self, candidate: ClassificationCandidate | str | bytes | Mapping[str, Any]) -> ValidatedClassification:
        candidate = parse_candidate(candidate)
        proposed = candidate.path.deepest_level()

        accepted: dict[str, str] = {}
        parent_ids: set[str | None] = {None}
        for level in HierarchyLevel:
            value = candidate.path.get(level)
            if value is None:
                break
            matches = {
                n.id
                for n in self.tree.nodes_at_level(level)
                if n.name == value and n.parent_id in parent_ids
            }
            if not matches:
                logger.debug(
                    "Dropped %s=%r: no node at level %d under the accepted parent",
                    level.field_name,
                    value,
                    level,
                )
                break
            accepted[level.field_name] = value
            parent_ids = set(matches)

        return ValidatedClassification(
            **accepted,
            confidence=candidate.confidence,
            level_confidence=dict(candidate.level_confidence),
            reasoning=candidate.reasoning,
            proposed_depth=int(proposed) if proposed is not None else 0,
        )
