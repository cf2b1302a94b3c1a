"""Prompt construction utilities (pure functions)."""

import logging
from collections.abc import Sequence
from typing import Any

from application.constants import (
    EQUIPMENT_DETAILS_KEY,
    HIERARCHY_SUMMARY_KEY,
    KEYWORDS_KEY,
    NO_KEYWORDS_TEXT,
    RELEVANT_TYPES_HEADER,
    RELEVANT_TYPES_KEY,
)
from domain.schemas import PATH_SEPARATOR, EquipmentDetails, EquipmentTypeNode
from domain.taxonomy.tree import TypeTree
from infrastructure.prompting.manager import PromptObj

logger = logging.getLogger(__name__)


def format_equipment_details(equipment: EquipmentDetails) -> str:
    lines = [
        f"- Name: {equipment.name}",
        f"- Brand: {equipment.brand}",
        f"- Model: {equipment.model}",
    ]
    if equipment.description:
        lines.append(f"- Description: {equipment.description}")
    return "\n".join(lines)


def format_relevant_types(tree: TypeTree, relevant: Sequence[EquipmentTypeNode]) -> str:
    """
    Group relevant nodes under their full path, one line per distinct path.

    Example line: "HEATING → Boiler → Gas Boiler: Gas Boiler"
    """
    grouped: dict[str, list[str]] = {}
    for node in relevant:
        path = PATH_SEPARATOR.join(tree.get_path(node.id))
        grouped.setdefault(path, []).append(node.name)
    return "\n".join(f"{path}: {', '.join(names)}" for path, names in grouped.items())


def build_user_prompt(
    user_prompt: PromptObj,
    *,
    equipment: EquipmentDetails,
    keywords: Sequence[str],
    hierarchy_summary: str,
    tree: TypeTree,
    relevant: Sequence[EquipmentTypeNode],
) -> str:
    """
    Render the user prompt template for one equipment.

    The relevant-types block is only included when the keyword filter found
    something; it never replaces the full hierarchy summary.

    Raises:
        TypeError: If the prompt object renders to an unsupported type
    """
    relevant_block = ""
    if relevant:
        relevant_block = f"{RELEVANT_TYPES_HEADER}\n{format_relevant_types(tree, relevant)}"
    logger.debug("Prompt context: %d keywords, %d relevant types", len(keywords), len(relevant))

    rendered: Any = user_prompt.format(
        **{
            EQUIPMENT_DETAILS_KEY: format_equipment_details(equipment),
            KEYWORDS_KEY: ", ".join(keywords) if keywords else NO_KEYWORDS_TEXT,
            HIERARCHY_SUMMARY_KEY: hierarchy_summary,
            RELEVANT_TYPES_KEY: relevant_block,
        }
    )

    if isinstance(rendered, str):
        return rendered

    # Handle common structured formats (e.g., OpenAI Chat messages)
    if isinstance(rendered, list):
        parts: list[str] = []
        for msg in rendered:
            if not isinstance(msg, dict):
                continue
            content: Any = msg.get("content")
            if isinstance(content, str):
                parts.append(content)
            elif isinstance(content, list):
                for block in content:
                    if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str):
                        parts.append(block["text"])
        return "\n".join(p for p in parts if p).strip()

    raise TypeError(f"Prompt.format() returned unsupported type: {type(rendered)}")
