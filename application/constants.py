"""Application-level constants."""

# Prompt placeholders (Mustache: {{name}})
EQUIPMENT_DETAILS_KEY = "equipment_details"
KEYWORDS_KEY = "keywords"
HIERARCHY_SUMMARY_KEY = "hierarchy_summary"
RELEVANT_TYPES_KEY = "relevant_types"

RELEVANT_TYPES_HEADER = "Most relevant types based on keywords:"
NO_KEYWORDS_TEXT = "none"
