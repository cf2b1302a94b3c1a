"""Keyword extraction and relevance filtering used to enrich classifier prompts."""

import logging
from collections.abc import Iterable, Mapping, Sequence

from domain.schemas import EquipmentTypeNode

logger = logging.getLogger(__name__)

# Category tag -> terms. Terms are matched as lower-case substrings.
DEFAULT_KEYWORD_CATEGORIES: dict[str, list[str]] = {
    "plomberie": [
        "vanne", "valve", "robinet", "papillon", "globe", "bille", "diaphragme",
        "tuyau", "tube", "conduite", "canalisation", "pompe", "circulateur",
        "compteur", "eau", "chauffage", "sanitaire", "plomberie", "hydraulique",
        "2 voies", "3 voies", "v2v", "v3v", "equilibrage", "decharge", "detente",
    ],
    "cvc": [
        "compresseur", "condenser", "evaporator", "chiller", "heater", "pump",
        "fan", "motor", "cvc", "hvac", "climatisation", "refrigeration",
        "ventilation", "cassette", "plafond", "plafonniere", "gainable",
        "split", "monobloc", "reversible", "ventilo", "convecteur",
        "radiateur", "emetteur", "unite", "interieure", "exterieure",
    ],
    "electricite": [
        "tableau", "armoire", "disjoncteur", "interrupteur", "prise", "cable",
        "electrique", "electricite", "courant", "tension", "puissance",
        "eclairage", "lumiere", "lampe", "spot", "baes", "securite",
    ],
    "incendie": [
        "detecteur", "fumee", "chaleur", "incendie", "securite", "alarme",
        "sprinkler", "extincteur", "robinet", "pompe", "fire", "smoke",
    ],
    "metrologie": [
        "compteur", "mesure", "capteur", "sonde", "thermometre", "manometre",
        "debitmetre", "metrologie", "instrumentation",
    ],
}


class KeywordRelevanceFilter:
    """Best-effort recall filter over a fixed table of keyword categories."""

    def __init__(self, categories: Mapping[str, Sequence[str]] | None = None) -> None:
        table = DEFAULT_KEYWORD_CATEGORIES if categories is None else categories
        self.categories: dict[str, list[str]] = {
            str(tag).strip().lower(): [str(t).strip().lower() for t in terms if str(t).strip()]
            for tag, terms in table.items()
        }

    def extract_keywords(self, text: str) -> list[str]:
        """
        Return category tags and literal terms found in ``text``.

        Every matching term contributes both its category tag and itself. The
        result is de-duplicated and keeps first-seen order.
        """
        haystack = (text or "").lower()
        found: dict[str, None] = {}
        for tag, terms in self.categories.items():
            for term in terms:
                if term in haystack:
                    found[tag] = None
                    found[term] = None
        keywords = list(found)
        logger.debug("Extracted %d keywords", len(keywords))
        return keywords

    def filter_relevant(
        self,
        nodes: Iterable[EquipmentTypeNode],
        keywords: Iterable[str],
    ) -> list[EquipmentTypeNode]:
        """Nodes whose lower-cased name contains any keyword; empty when there are no keywords."""
        needles = [k.lower() for k in keywords if k]
        if not needles:
            return []
        return [n for n in nodes if any(k in n.name.lower() for k in needles)]
