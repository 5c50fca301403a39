from pathlib import Path

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / '.env'

DEFAULT_HF_MODELS = [
    "openai-community/roberta-base-openai-detector",
    "Hello-SimpleAI/chatgpt-detector-roberta",
]
DEFAULT_AI_LABEL_TOKENS = ["chatgpt", "gpt", "ai", "llm", "machine", "generated", "fake"]
DEFAULT_HUMAN_LABEL_TOKENS = ["human"]


class DetectorConfig(BaseSettings):
    """Decision engine thresholds and policy switches."""

    model_config = SettingsConfigDict(
        env_prefix='DETECTOR_',
        env_file=ENV_FILE,
        extra='ignore',
        populate_by_name=True,
    )

    provider: str | None = None

    # Chunking
    max_chunks: int = Field(4, ge=1)
    chunk_len: int = Field(400, ge=1)

    # Ensemble calibration
    ai_chunk_threshold: float = Field(0.6, ge=0.0, le=1.0)
    min_margin: float = Field(0.15, ge=0.0, le=1.0)
    min_max_score: float = Field(
        0.55,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("min_max_score", "DETECTOR_MIN_MAXSCORE"),
    )
    ai_multiplier: float = Field(1.0, ge=0.0)
    ai_bias: float = Field(0.0, ge=-1.0, le=1.0)

    # Tiebreaker and human guardrails
    tiebreak_human_conf: int = Field(85, ge=0, le=100)
    tiebreak_short_len: int = Field(300, ge=0)
    human_conf_cap: int = Field(95, ge=0, le=100)
    strict_mode: bool = True
    human_strict_threshold: int = Field(95, ge=0, le=100)

    # Outreach heuristic
    heuristic_salesy: bool = True
    heuristic_threshold: float = Field(0.5, ge=0.0, le=1.0)
    heuristic_max_len: int = Field(400, ge=0)

    use_cache: bool = False

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


class HuggingFaceConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='HF_',
        env_file=ENV_FILE,
        extra='ignore',
        populate_by_name=True,
        protected_namespaces=(),
    )

    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("huggingface_api_key", "hf_api_key"),
    )
    model_ids: str = ""
    model_id: str = ""
    endpoint_url: str | None = None
    inference_url: str = "https://router.huggingface.co/hf-inference/models"

    ai_label_tokens: list[str] = Field(default_factory=lambda: list(DEFAULT_AI_LABEL_TOKENS))
    human_label_tokens: list[str] = Field(default_factory=lambda: list(DEFAULT_HUMAN_LABEL_TOKENS))

    @computed_field
    @property
    def models(self) -> list[str]:
        configured = [m.strip() for m in (self.model_ids or self.model_id).split(",") if m.strip()]
        return configured or list(DEFAULT_HF_MODELS)


class OpenAIConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='OPENAI_',
        env_file=ENV_FILE,
        extra='ignore',
    )
    api_key: str | None = None
    model: str = "gpt-4.1-mini"
    base_url: str = "https://api.openai.com/v1"


class Config(BaseSettings):
    app_name: str = "textcheck"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # Applies to every outbound provider call
    http_timeout_seconds: float = Field(60.0, gt=0)

    # Nested configs
    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    huggingface: HuggingFaceConfig = Field(default_factory=HuggingFaceConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    @computed_field
    @property
    def provider(self) -> str:
        """Provider that serves requests; HF is preferred when a key is present."""
        if self.detector.provider:
            return "huggingface" if self.detector.provider == "huggingface" else "openai"
        return "huggingface" if self.huggingface.api_key else "openai"


config = Config()
