from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .model_store import HFModelSpec, ModelDownloadError, ensure_model_downloaded


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


class LLMSettingsLike(Protocol):
    model_path: str
    hf_filename: str
    hf_repo_id: str
    hf_revision: str
    system_prompt: str
    n_threads: int
    n_ctx: int
    n_batch: int
    temperature: float
    top_p: float
    repeat_penalty: float
    max_tokens: int
    verbose: bool


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for pace inference with a local GGUF model."""

    model_path: str
    system_prompt_path: str = ""
    n_threads: int = 4
    n_ctx: int = 1024
    n_batch: int = 256
    temperature: float = 0.2
    top_p: float = 0.9
    repeat_penalty: float = 1.1
    max_tokens: int = 128
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if not self.model_path or not self.model_path.strip():
            raise ConfigurationError("model_path cannot be empty")

        model_file = Path(self.model_path)
        if not model_file.exists():
            raise ConfigurationError(f"Model file does not exist: {self.model_path}")
        if not model_file.is_file():
            raise ConfigurationError(f"Model path is not a file: {self.model_path}")

        if not 1 <= self.n_threads <= 64:
            raise ConfigurationError(f"n_threads must be in [1, 64], got: {self.n_threads}")

        if not 128 <= self.n_ctx <= 32768:
            raise ConfigurationError(f"n_ctx must be in [128, 32768], got: {self.n_ctx}")

        if self.n_batch < 1:
            raise ConfigurationError(f"n_batch must be >= 1, got: {self.n_batch}")
        if self.n_batch > self.n_ctx:
            raise ConfigurationError(
                f"n_batch ({self.n_batch}) cannot exceed n_ctx ({self.n_ctx})"
            )

        if not 0.0 <= self.temperature <= 2.0:
            raise ConfigurationError(
                f"temperature must be in [0.0, 2.0], got: {self.temperature}"
            )

        if not 0.0 <= self.top_p <= 1.0:
            raise ConfigurationError(f"top_p must be in [0.0, 1.0], got: {self.top_p}")

        if not 1.0 <= self.repeat_penalty <= 2.0:
            raise ConfigurationError(
                f"repeat_penalty must be in [1.0, 2.0], got: {self.repeat_penalty}"
            )

        if self.max_tokens < 16:
            raise ConfigurationError(f"max_tokens must be >= 16, got: {self.max_tokens}")

    @classmethod
    def from_settings(
        cls,
        settings: LLMSettingsLike,
        *,
        hf_token: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "LLMConfig":
        """Build a validated config from the `[llm]` section.

        The model file is downloaded from the Hugging Face Hub when
        ``hf_repo_id`` is set and the file is not already present.

        Raises:
            ConfigurationError: If settings are invalid or the model is unavailable
        """
        logger = logger or logging.getLogger(__name__)
        model_path = cls._resolve_model_path(settings, hf_token=hf_token, logger=logger)
        return cls(
            model_path=model_path,
            system_prompt_path=settings.system_prompt,
            n_threads=settings.n_threads,
            n_ctx=settings.n_ctx,
            n_batch=settings.n_batch,
            temperature=settings.temperature,
            top_p=settings.top_p,
            repeat_penalty=settings.repeat_penalty,
            max_tokens=settings.max_tokens,
            verbose=settings.verbose,
        )

    @staticmethod
    def _resolve_model_path(
        settings: LLMSettingsLike,
        *,
        hf_token: Optional[str],
        logger: logging.Logger,
    ) -> str:
        model_dir_str = settings.model_path.strip()
        if not model_dir_str:
            raise ConfigurationError("llm.model_path is required and must point to a directory")

        filename = settings.hf_filename.strip()
        if not filename:
            raise ConfigurationError("llm.hf_filename is required")
        if not filename.endswith(".gguf"):
            raise ConfigurationError(f"llm.hf_filename must be a .gguf file, got: {filename}")

        model_dir = Path(model_dir_str)
        repo_id = settings.hf_repo_id.strip() or None

        if not repo_id:
            target_path = model_dir / filename
            if not target_path.is_file():
                raise ConfigurationError(
                    f"Model file not found: {target_path}\n"
                    "Either place the file there manually or set llm.hf_repo_id "
                    "to download it automatically."
                )
            logger.info("Using existing pace model: %s", target_path)
            return str(target_path.absolute())

        logger.info("Ensuring pace model is available: %s/%s", repo_id, filename)
        try:
            spec = HFModelSpec(
                repo_id=repo_id,
                filename=filename,
                revision=settings.hf_revision.strip() or None,
            )
            resolved_path = ensure_model_downloaded(
                spec,
                models_dir=model_dir,
                hf_token=hf_token,
                logger=logger,
            )
        except (ValueError, ModelDownloadError) as error:
            raise ConfigurationError(
                f"Failed to resolve model from {repo_id}: {error}"
            ) from error
        return str(resolved_path.absolute())
