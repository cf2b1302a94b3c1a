"""
Equipment-type taxonomy: tree indexing, summaries, keyword filtering,
candidate validation and cascading selection.

All functions in this module are pure (no file I/O), except for the summary
cache, which reads a clock.
"""

from domain.taxonomy.cascade import CascadeSelection, CascadeSelectionController
from domain.taxonomy.keywords import DEFAULT_KEYWORD_CATEGORIES, KeywordRelevanceFilter
from domain.taxonomy.loader import build_records_from_rows, parse_taxonomy_records
from domain.taxonomy.summary import ContextSummarizer, TTLCache, render_hierarchy_summary
from domain.taxonomy.tree import TypeTree
from domain.taxonomy.validator import ClassificationValidator, parse_candidate

__all__ = [
    "TypeTree",
    "parse_taxonomy_records",
    "build_records_from_rows",
    "ContextSummarizer",
    "TTLCache",
    "render_hierarchy_summary",
    "KeywordRelevanceFilter",
    "DEFAULT_KEYWORD_CATEGORIES",
    "ClassificationValidator",
    "parse_candidate",
    "CascadeSelectionController",
    "CascadeSelection",
]
