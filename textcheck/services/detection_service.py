"""AI text detection service: classifier ensemble (primary) and generative model (fallback)."""
import asyncio
import time

from textcheck.core.config import Config
from textcheck.core.logging import get_logger
from textcheck.dtos.detection_dto import (
    LIKELY_AI,
    LIKELY_HUMAN,
    ChunkDTO,
    DetectionInputDTO,
    DetectionResultDTO,
    ModelResultDTO,
    TieBreakResultDTO,
    VerdictDTO,
)
from textcheck.services.classifier_client import HuggingFaceClassifier
from textcheck.services.generative_client import (
    ARBITER_PROMPT,
    FALLBACK_PROMPT,
    GenerativeVerdict,
    OpenAIStructuredClient,
)
from textcheck.utils.chunk_aggregator import (
    aggregate_ensemble,
    aggregate_model_chunks,
    failed_model_result,
)
from textcheck.utils.heuristics import apply_salesy_override
from textcheck.utils.policy import finalize_verdict, remap_generative_confidence
from textcheck.utils.score_extractor import (
    LabelMapping,
    extract_chunk_score,
    flatten_candidates,
    to_percent,
)
from textcheck.utils.text_chunker import split_text_into_chunks

logger = get_logger(__name__)

ARBITER_TEMPERATURE = 0.1
FALLBACK_TEMPERATURE = 0.2
ARBITER_MIN_AI_CONFIDENCE = 60


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class DetectionService:
    """Orchestrates the classifier ensemble with the generative model as arbiter and fallback."""

    def __init__(
        self,
        classifier: HuggingFaceClassifier,
        generator: OpenAIStructuredClient,
        config: Config,
    ) -> None:
        self._classifier = classifier
        self._generator = generator
        self._settings = config.detector
        self._models = config.huggingface.models
        self._label_mapping = LabelMapping.from_tokens(
            config.huggingface.ai_label_tokens,
            config.huggingface.human_label_tokens,
        )
        self._use_ensemble = config.provider == "huggingface" and bool(config.huggingface.api_key)

    @property
    def provider(self) -> str:
        return "huggingface" if self._use_ensemble else "openai"

    @property
    def models(self) -> list[str]:
        return list(self._models)

    async def detect(self, dto: DetectionInputDTO) -> DetectionResultDTO:
        """Use the ensemble when available; fall back to the generative model otherwise."""
        started = time.perf_counter()
        result = None
        if self._use_ensemble:
            result = await self._detect_with_ensemble(dto.text)
            if result is None:
                logger.warning("all_classifiers_failed_falling_back", models=self._models)

        if result is None:
            result = await self._detect_with_generative(dto.text)
        result.elapsed_ms = _elapsed_ms(started)
        return result

    async def _run_model(self, model: str, chunks: list[ChunkDTO]) -> ModelResultDTO:
        """Score every chunk with one model; any failing chunk fails the whole model."""
        started = time.perf_counter()
        outcomes = await asyncio.gather(
            *(self._classifier.classify(model, chunk.text) for chunk in chunks),
            return_exceptions=True,
        )
        latency_ms = _elapsed_ms(started)

        for outcome in outcomes:
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
        errors = [o for o in outcomes if isinstance(o, Exception)]
        if errors:
            error = errors[0]
            logger.warning(
                "model_invocation_failed",
                model=model,
                error=str(error),
                error_type=type(error).__name__,
            )
            return failed_model_result(model, latency_ms, str(error) or type(error).__name__)

        chunk_scores = [
            extract_chunk_score(
                flatten_candidates(raw),
                self._label_mapping,
                ai_multiplier=self._settings.ai_multiplier,
                ai_bias=self._settings.ai_bias,
            )
            for raw in outcomes
        ]
        return aggregate_model_chunks(model, chunk_scores, latency_ms, raw_result=outcomes[-1])

    async def _detect_with_ensemble(self, text: str) -> DetectionResultDTO | None:
        chunks = split_text_into_chunks(
            text,
            target_len=self._settings.chunk_len,
            max_chunks=self._settings.max_chunks,
        )
        per_model = list(
            await asyncio.gather(*(self._run_model(model, chunks) for model in self._models))
        )

        outcome = aggregate_ensemble(per_model, self._settings)
        if outcome is None:
            return None
        aggregate, verdict = outcome
        valid = [r for r in per_model if r.candidates]

        verdict = apply_salesy_override(verdict, text, aggregate, self._settings)
        verdict, tie_breaker = await self._tiebreak(verdict, text)
        verdict = finalize_verdict(
            verdict,
            self._settings,
            ai_side_confidence=lambda _: to_percent(aggregate.ai_side),
        )

        logger.info(
            "ensemble_verdict",
            label=verdict.label,
            confidence=verdict.confidence,
            chunks=len(chunks),
            valid_models=len(valid),
            agg_ai=round(aggregate.agg_ai, 4),
            agg_human=round(aggregate.agg_human, 4),
            max_chunk_ai=round(aggregate.max_chunk_ai, 4),
        )
        return DetectionResultDTO(
            verdict=verdict,
            provider="huggingface",
            mode="ensemble",
            models=[r.model for r in valid],
            latency_ms=sum(r.latency_ms for r in valid),
            aggregate=aggregate,
            per_model=per_model,
            tie_breaker=tie_breaker,
        )

    def _should_tiebreak(self, verdict: VerdictDTO, text: str) -> bool:
        if verdict.label != LIKELY_HUMAN:
            return False
        return (
            verdict.confidence >= self._settings.tiebreak_human_conf
            or len(text) <= self._settings.tiebreak_short_len
        )

    async def _tiebreak(
        self, verdict: VerdictDTO, text: str
    ) -> tuple[VerdictDTO, TieBreakResultDTO | None]:
        """Ask the generative model to re-judge a confident or short human verdict."""
        if not self._should_tiebreak(verdict, text):
            return verdict, None

        try:
            answer = await self._generator.generate(
                ARBITER_PROMPT.format(text=text),
                GenerativeVerdict,
                temperature=ARBITER_TEMPERATURE,
            )
        except Exception as e:
            logger.warning(
                "tiebreaker_failed_keeping_ensemble_verdict",
                error=str(e),
                error_type=type(e).__name__,
            )
            return verdict, None

        tie_breaker = TieBreakResultDTO(
            label=answer.label,
            confidence=answer.confidence,
            explanation=answer.explanation,
        )
        logger.info("tiebreaker_result", label=answer.label, confidence=answer.confidence)

        if answer.label == LIKELY_AI and answer.confidence >= ARBITER_MIN_AI_CONFIDENCE:
            verdict = VerdictDTO(
                label=LIKELY_AI,
                confidence=to_percent(answer.confidence / 100),
                explanation=answer.explanation,
            )
        return verdict, tie_breaker

    async def _detect_with_generative(self, text: str) -> DetectionResultDTO:
        started = time.perf_counter()
        answer = await self._generator.generate(
            FALLBACK_PROMPT.format(text=text),
            GenerativeVerdict,
            temperature=FALLBACK_TEMPERATURE,
        )
        latency_ms = _elapsed_ms(started)

        verdict = VerdictDTO(
            label=answer.label,
            confidence=to_percent(answer.confidence / 100),
            explanation=answer.explanation,
        )
        strict_threshold = self._settings.human_strict_threshold
        verdict = finalize_verdict(
            verdict,
            self._settings,
            ai_side_confidence=lambda v: remap_generative_confidence(v, strict_threshold),
            strict_first=True,
        )

        logger.info(
            "generative_verdict",
            label=verdict.label,
            confidence=verdict.confidence,
            model=self._generator.model,
        )
        return DetectionResultDTO(
            verdict=verdict,
            provider="openai",
            model=self._generator.model,
            latency_ms=latency_ms,
        )
