from __future__ import annotations

from typing import Dict, Iterable, List, Literal

from schemas.analysis import Source

UNTITLED_SOURCE = "Untitled Source"

SuggestionTone = Literal["bullish", "bearish", "neutral", "unknown"]

_TONE_KEYWORDS = (
    ("bullish", ("buy", "invest", "bullish")),
    ("bearish", ("sell", "avoid", "bearish")),
    ("neutral", ("hold", "caution", "neutral")),
)


def source_title(source: Source) -> str:
    return source.title or UNTITLED_SOURCE


def render_sources(sources: Iterable[Source]) -> List[Dict[str, str]]:
    return [{"uri": s.uri, "title": source_title(s)} for s in sources]


def suggestion_tone(label: str) -> SuggestionTone:
    """Map a free-text suggestion/stance label to a display tone. First match wins."""
    lowered = (label or "").lower()
    for tone, keywords in _TONE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return tone  # type: ignore[return-value]
    return "unknown"
