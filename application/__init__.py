"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the equipment-type detection workflow.
"""

from application.detection import DetectionContext, build_detection_context, detect_equipment_type
from application.prompting import build_user_prompt, format_equipment_details, format_relevant_types

__all__ = [
    # Main workflow
    "detect_equipment_type",
    "build_detection_context",
    "DetectionContext",
    # Prompting utilities
    "build_user_prompt",
    "format_equipment_details",
    "format_relevant_types",
]
