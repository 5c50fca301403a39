"""Normalizes raw classifier output into canonical AI/human scores."""
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any

from textcheck.core.config import DEFAULT_AI_LABEL_TOKENS, DEFAULT_HUMAN_LABEL_TOKENS
from textcheck.dtos.detection_dto import ChunkScoreDTO, LabeledCandidateDTO


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def to_percent(score: float) -> int:
    """Convert a [0, 1] score to an integer percentage, rounding halves up."""
    return int(math.floor(100 * clamp(score) + 0.5))


@dataclass(frozen=True)
class LabelMapping:
    """Maps a provider's free-form labels onto the AI and human categories."""

    ai_tokens: tuple[str, ...] = tuple(DEFAULT_AI_LABEL_TOKENS)
    human_tokens: tuple[str, ...] = tuple(DEFAULT_HUMAN_LABEL_TOKENS)

    @classmethod
    def from_tokens(cls, ai_tokens: Iterable[str], human_tokens: Iterable[str]) -> "LabelMapping":
        return cls(
            ai_tokens=tuple(t.casefold() for t in ai_tokens),
            human_tokens=tuple(t.casefold() for t in human_tokens),
        )

    def is_ai(self, label: str) -> bool:
        normalized = label.casefold()
        return any(token in normalized for token in self.ai_tokens)

    def is_human(self, label: str) -> bool:
        normalized = label.casefold()
        return any(token in normalized for token in self.human_tokens)


def _as_candidate(item: Any) -> LabeledCandidateDTO | None:
    if not isinstance(item, Mapping):
        return None
    label = item.get("label")
    score = item.get("score")
    # bool is a Real subclass; a flag is not a score
    if not isinstance(label, str) or isinstance(score, bool) or not isinstance(score, Real):
        return None
    if not math.isfinite(score):
        return None
    return LabeledCandidateDTO(label=label, score=clamp(float(score)))


def flatten_candidates(raw: Any) -> list[LabeledCandidateDTO]:
    """Flatten a flat or one-level nested list of ``{label, score}`` items.

    Anything that is not a list (error payloads, ``None``) yields no candidates.
    The result is ordered by score, highest first.
    """
    if not isinstance(raw, list):
        return []

    candidates: list[LabeledCandidateDTO] = []
    for item in raw:
        nested = item if isinstance(item, list) else [item]
        for sub in nested:
            candidate = _as_candidate(sub)
            if candidate is not None:
                candidates.append(candidate)

    return sorted(candidates, key=lambda c: c.score, reverse=True)


def extract_chunk_score(
    candidates: list[LabeledCandidateDTO],
    mapping: LabelMapping,
    ai_multiplier: float = 1.0,
    ai_bias: float = 0.0,
) -> ChunkScoreDTO | None:
    """Derive the (ai, human) score pair for one chunk.

    Returns ``None`` when the chunk produced no candidates.
    """
    if not candidates:
        return None

    ai = max((c.score for c in candidates if mapping.is_ai(c.label)), default=0.0)
    human = next((c for c in candidates if mapping.is_human(c.label)), None)

    if ai == 0.0 and human is not None:
        ai = 1.0 - human.score
    ai = clamp(ai)

    human_score = clamp(human.score) if human is not None else 1.0 - ai
    biased_ai = clamp(ai * ai_multiplier + ai_bias)

    return ChunkScoreDTO(ai_score=biased_ai, human_score=human_score, candidates=candidates)
