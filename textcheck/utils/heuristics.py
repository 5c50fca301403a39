"""Phrase-based override for short outreach and marketing text."""
from dataclasses import replace

from textcheck.core.config import DetectorConfig
from textcheck.core.logging import get_logger
from textcheck.dtos.detection_dto import (
    LIKELY_AI,
    LIKELY_HUMAN,
    EnsembleAggregateDTO,
    VerdictDTO,
)
from textcheck.utils.score_extractor import clamp, to_percent

logger = get_logger(__name__)

SALESY_PHRASES = (
    "circling back",
    "touching base",
    "checking in",
    "quick question",
    "on your radar",
    "open to a chat",
    "would love to connect",
    "curious if",
    "actively looking to solve",
    "challenge of",
    "genuinely human",
    "automated communication",
    "scale",
    "workflow",
    "streamline",
    "optimize",
    "leverage",
)
SALESY_EXPLANATION = (
    "Short outreach-like phrasing detected; leaning AI. "
    "This is a heuristic adjustment combined with model signals."
)

_PHRASES_TO_SATURATE = 4
_QUESTION_MARK_WEIGHT = 0.1
_QUESTION_MARK_CAP = 0.3
_SHORT_TEXT_BONUS = 0.1


def compute_salesy_suspicion(text: str, max_len: int) -> float:
    """Score in [0, 1] for how much the text reads like generic outreach."""
    lowered = text.casefold()
    hits = sum(1 for phrase in SALESY_PHRASES if phrase in lowered)

    phrase_score = min(1.0, hits / _PHRASES_TO_SATURATE)
    punct_score = min(_QUESTION_MARK_CAP, text.count("?") * _QUESTION_MARK_WEIGHT)
    length_bonus = _SHORT_TEXT_BONUS if len(text) <= max_len else 0.0

    return clamp(phrase_score + punct_score + length_bonus)


def apply_salesy_override(
    verdict: VerdictDTO,
    text: str,
    aggregate: EnsembleAggregateDTO,
    settings: DetectorConfig,
) -> VerdictDTO:
    """Flip a short "likely human" verdict to AI when the text looks like outreach."""
    if not settings.heuristic_salesy or verdict.label != LIKELY_HUMAN:
        return verdict
    if len(text) > settings.heuristic_max_len:
        return verdict

    suspicion = compute_salesy_suspicion(text, settings.heuristic_max_len)
    if suspicion < settings.heuristic_threshold:
        return verdict

    ai_side = max(aggregate.ai_side, suspicion * 0.9)
    logger.info("salesy_override_applied", suspicion=round(suspicion, 3))
    return replace(
        verdict,
        label=LIKELY_AI,
        confidence=max(verdict.confidence, to_percent(ai_side)),
        explanation=SALESY_EXPLANATION,
    )
