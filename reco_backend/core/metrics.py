"""
Compteurs Prometheus du moteur de références.

Enregistrés dans le registre par défaut: la route `/metrics` de l'application les expose avec les
métriques HTTP.
"""

from prometheus_client import Counter

RECOMMENDATIONS_TOTAL = Counter(
    "recommendations_total",
    "Recommendation calls by outcome (filtered, fallback, empty)",
    ["outcome"],
)
KEYWORD_EXTRACTION_TOTAL = Counter(
    "keyword_extraction_total",
    "Keyword resolutions by source (llm, fallback, none)",
    ["source"],
)
TAG_SELECTION_TOTAL = Counter(
    "tag_selection_total",
    "Portfolio facet selections from a prompt by outcome (llm, failed, skipped)",
    ["outcome"],
)
