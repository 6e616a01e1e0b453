"""Hugging Face download and GGUF validation helpers for the local pace model."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from huggingface_hub import hf_hub_download
from huggingface_hub.utils import HfHubHTTPError, RepositoryNotFoundError

GGUF_MAGIC = b"GGUF"


class ModelDownloadError(Exception):
    """Raised when model download or validation fails."""

    pass


@dataclass(frozen=True)
class HFModelSpec:
    """A single GGUF file in a Hugging Face repository."""

    repo_id: str
    filename: str
    revision: Optional[str] = None

    def __post_init__(self):
        if not self.repo_id or not self.repo_id.strip():
            raise ValueError("repo_id cannot be empty")
        if not self.filename or not self.filename.strip():
            raise ValueError("filename cannot be empty")
        if not self.filename.endswith(".gguf"):
            raise ValueError(f"filename must be a .gguf file, got: {self.filename}")


def is_gguf_file(path: Path, logger: Optional[logging.Logger] = None) -> bool:
    """Return True when ``path`` starts with the GGUF magic bytes."""
    logger = logger or logging.getLogger(__name__)
    try:
        with open(path, "rb") as fh:
            magic = fh.read(len(GGUF_MAGIC))
    except OSError as error:
        logger.error("Failed to read model file %s: %s", path, error)
        return False

    if magic != GGUF_MAGIC:
        logger.warning("File %s does not have GGUF magic bytes: %s", path, magic.hex())
        return False
    return True


def ensure_model_downloaded(
    spec: HFModelSpec,
    *,
    models_dir: str | Path = "models",
    hf_token: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
    validate_gguf: bool = True,
) -> Path:
    """Ensure the GGUF model file exists in ``models_dir`` and return its path.

    Existing regular files that pass validation are reused. Symlinks are
    replaced by a regular file so the model directory never points into the
    Hugging Face cache.

    Raises:
        ModelDownloadError: If download, validation, or installation fails
    """
    logger = logger or logging.getLogger(__name__)
    models_dir = _prepare_models_dir(Path(models_dir))
    target_path = models_dir / spec.filename

    if _reusable_target(target_path, validate_gguf=validate_gguf, logger=logger):
        return target_path

    downloaded = _download(spec, hf_token=hf_token, logger=logger)
    if validate_gguf and not is_gguf_file(downloaded, logger):
        raise ModelDownloadError(f"Downloaded file {downloaded} is not a valid GGUF file")

    _install(downloaded, target_path, logger=logger)
    return target_path


def _prepare_models_dir(models_dir: Path) -> Path:
    try:
        models_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ModelDownloadError(f"Cannot create models directory {models_dir}: {e}") from e

    if not os.access(models_dir, os.W_OK):
        raise ModelDownloadError(f"Models directory {models_dir} is not writable")
    return models_dir


def _reusable_target(
    target_path: Path,
    *,
    validate_gguf: bool,
    logger: logging.Logger,
) -> bool:
    if target_path.is_symlink():
        logger.warning(
            "Existing model path %s is a symlink; replacing it with a regular file",
            target_path,
        )
        try:
            target_path.unlink()
        except OSError as e:
            raise ModelDownloadError(
                f"Failed to remove symlinked model file {target_path}: {e}"
            ) from e
        return False

    if not target_path.exists():
        return False

    if not target_path.is_file():
        raise ModelDownloadError(f"Model path exists but is not a regular file: {target_path}")

    try:
        size = target_path.stat().st_size
    except OSError as e:
        logger.warning("Cannot stat existing file %s: %s", target_path, e)
        return False

    if size == 0:
        return False
    if validate_gguf and not is_gguf_file(target_path, logger):
        logger.warning("Existing file %s failed GGUF validation, re-downloading", target_path)
        return False

    logger.info("Model already exists: %s (%s bytes)", target_path, f"{size:,}")
    return True


def _download(spec: HFModelSpec, *, hf_token: Optional[str], logger: logging.Logger) -> Path:
    logger.info(
        "Downloading model from %s/%s (revision: %s)",
        spec.repo_id,
        spec.filename,
        spec.revision or "main",
    )
    try:
        downloaded_path = hf_hub_download(
            repo_id=spec.repo_id,
            filename=spec.filename,
            revision=spec.revision,
            token=hf_token,
        )
    except RepositoryNotFoundError as e:
        raise ModelDownloadError(
            f"Repository not found: {spec.repo_id}. "
            "Check that the repo exists and you have access."
        ) from e
    except HfHubHTTPError as e:
        if "404" in str(e):
            raise ModelDownloadError(
                f"File not found: {spec.filename} in {spec.repo_id}."
            ) from e
        raise ModelDownloadError(f"HTTP error downloading from {spec.repo_id}: {e}") from e
    except Exception as e:
        raise ModelDownloadError(f"Failed to download model from {spec.repo_id}: {e}") from e

    path = Path(downloaded_path)
    if not path.is_file():
        raise ModelDownloadError(f"Downloaded file does not exist: {path}")
    logger.info("Download complete: %s", path)
    return path


def _install(source: Path, target_path: Path, *, logger: logging.Logger) -> None:
    temp_path = target_path.with_suffix(".tmp")
    try:
        if temp_path.exists():
            temp_path.unlink()
        try:
            temp_path.hardlink_to(source)
            logger.debug("Created hardlink to %s", source)
        except (OSError, NotImplementedError):
            logger.debug("Hardlink failed, copying file...")
            shutil.copy2(source, temp_path)

        if target_path.exists():
            target_path.unlink()
        temp_path.rename(target_path)
    except OSError as e:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.debug("Could not remove temporary file %s", temp_path)
        raise ModelDownloadError(f"Failed to install model to {target_path}: {e}") from e

    logger.info("Model ready at %s", target_path)
