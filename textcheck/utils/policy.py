"""Final verdict policy: human confidence cap and strict-mode remap."""
from collections.abc import Callable
from dataclasses import replace

from textcheck.core.config import DetectorConfig
from textcheck.dtos.detection_dto import LIKELY_AI, LIKELY_HUMAN, VerdictDTO

STRICT_EXPLANATION = (
    "Strict policy applied: borderline human scores are classified as AI for accuracy."
)
MIN_REMAPPED_CONFIDENCE = 60


def remap_generative_confidence(verdict: VerdictDTO, strict_threshold: int) -> int:
    """Confidence for a strict-remapped verdict that has no ensemble scores behind it."""
    shortfall = max(0, strict_threshold - verdict.confidence)
    return max(MIN_REMAPPED_CONFIDENCE, 100 - shortfall)


def _cap_human(verdict: VerdictDTO, settings: DetectorConfig) -> VerdictDTO:
    return replace(verdict, confidence=min(verdict.confidence, settings.human_conf_cap))


def finalize_verdict(
    verdict: VerdictDTO,
    settings: DetectorConfig,
    ai_side_confidence: Callable[[VerdictDTO], int],
    strict_first: bool = False,
) -> VerdictDTO:
    """Apply the human confidence cap and the strict-mode remap to a human verdict.

    By default the cap comes first and the strict check sees the capped
    confidence, which is how ensemble verdicts are finalized. With
    ``strict_first`` the strict check sees the raw confidence and only a
    surviving human verdict is capped; generative verdicts use this order.

    ``ai_side_confidence`` computes the confidence of the remapped AI verdict.
    """
    if verdict.label != LIKELY_HUMAN:
        return verdict

    if not strict_first:
        verdict = _cap_human(verdict, settings)

    if settings.strict_mode and verdict.confidence <= settings.human_strict_threshold:
        return VerdictDTO(
            label=LIKELY_AI,
            confidence=ai_side_confidence(verdict),
            explanation=STRICT_EXPLANATION,
        )

    return _cap_human(verdict, settings)
