from .config import ConfigurationError, LLMConfig
from .model_store import HFModelSpec, ModelDownloadError, ensure_model_downloaded
from .parser import PaceResponseError, PaceResponseParser
from .service import PaceAssistantLLM
from .types import DEFAULT_PACE, DEFAULT_PACE_ADVICE, PaceAdvice, PaceRequest

__all__ = [
    "ConfigurationError",
    "DEFAULT_PACE",
    "DEFAULT_PACE_ADVICE",
    "HFModelSpec",
    "LLMConfig",
    "ModelDownloadError",
    "PaceAdvice",
    "PaceAssistantLLM",
    "PaceRequest",
    "PaceResponseError",
    "PaceResponseParser",
    "ensure_model_downloaded",
]
