"""
Condensed hierarchy digest for classifier prompts, behind a single-slot TTL cache.

The digest lists every domain with its number of types, every type with its
number of categories, and every category with its number of subcategories.
Tree writes do not invalidate the cache: a rebuilt digest is produced only once
the TTL has elapsed or ``invalidate()`` is called.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from domain.taxonomy.tree import TypeTree

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_TTL_S = 5 * 60

Clock = Callable[[], float]


@dataclass(frozen=True)
class HierarchySummary:
    """A rendered digest and the clock reading at which it was built."""

    text: str
    created_at: float


class TTLCache:
    """One-slot read-through cache. A ttl of 0 disables caching."""

    def __init__(self, ttl_s: float = DEFAULT_SUMMARY_TTL_S, clock: Clock = time.monotonic) -> None:
        if ttl_s < 0:
            raise ValueError("ttl_s must be >= 0")
        self.ttl_s = ttl_s
        self._clock = clock
        self._entry: HierarchySummary | None = None

    def get_or_build(self, build: Callable[[], str]) -> str:
        now = self._clock()
        entry = self._entry
        if entry is not None and (now - entry.created_at) < self.ttl_s:
            logger.debug("Hierarchy summary cache hit (age=%.1fs)", now - entry.created_at)
            return entry.text

        text = build()
        self._entry = HierarchySummary(text=text, created_at=now)
        logger.debug("Hierarchy summary rebuilt (%d chars)", len(text))
        return text

    def invalidate(self) -> None:
        self._entry = None

    @property
    def entry(self) -> HierarchySummary | None:
        return self._entry


def render_hierarchy_summary(tree: TypeTree) -> str:
    """Render the nested (domain: count) -> (type: count) -> (category: count) digest."""
    lines: list[str] = []
    for domain in tree.children(None):
        types = tree.children(domain.id)
        lines.append(f"{domain.name} ({len(types)} types):")
        for type_node in types:
            categories = tree.children(type_node.id)
            lines.append(f"  - {type_node.name} ({len(categories)} categories)")
            for category in categories:
                lines.append(f"    * {category.name} ({len(tree.children(category.id))} subcategories)")
    return "\n".join(lines)


class ContextSummarizer:
    """Serves the hierarchy digest of ``tree`` through a TTL cache."""

    def __init__(
        self,
        tree: TypeTree,
        *,
        ttl_s: float = DEFAULT_SUMMARY_TTL_S,
        clock: Clock = time.monotonic,
        cache: TTLCache | None = None,
    ) -> None:
        self.tree = tree
        self.cache = cache if cache is not None else TTLCache(ttl_s=ttl_s, clock=clock)

    def get_summary(self) -> str:
        return self.cache.get_or_build(lambda: render_hierarchy_summary(self.tree))

    def invalidate(self) -> None:
        self.cache.invalidate()
