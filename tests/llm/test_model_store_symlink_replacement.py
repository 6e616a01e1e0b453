import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config_schema import LLMSettings
from llm import ConfigurationError, LLMConfig
from llm.model_store import HFModelSpec, ModelDownloadError, ensure_model_downloaded


class ModelStoreSymlinkReplacementTests(unittest.TestCase):
    def test_existing_symlink_target_is_replaced_with_regular_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            models_dir = root / "models"
            models_dir.mkdir(parents=True, exist_ok=True)

            target = models_dir / "tiny.gguf"
            downloaded_blob = root / "blob.gguf"
            downloaded_blob.write_bytes(b"GGUFtest")
            target.symlink_to(downloaded_blob)

            spec = HFModelSpec(repo_id="fake/repo", filename=target.name)

            with patch("llm.model_store.hf_hub_download", return_value=str(downloaded_blob)):
                resolved = ensure_model_downloaded(
                    spec,
                    models_dir=models_dir,
                    validate_gguf=True,
                )

            self.assertEqual(target, resolved)
            self.assertTrue(resolved.is_file())
            self.assertFalse(resolved.is_symlink())
            self.assertEqual(b"GGUF", resolved.read_bytes()[:4])

    def test_valid_existing_file_is_reused_without_download(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            models_dir = Path(tmp)
            target = models_dir / "tiny.gguf"
            target.write_bytes(b"GGUFexisting")
            spec = HFModelSpec(repo_id="fake/repo", filename=target.name)

            with patch("llm.model_store.hf_hub_download") as download:
                resolved = ensure_model_downloaded(spec, models_dir=models_dir)

            download.assert_not_called()
            self.assertEqual(target, resolved)

    def test_invalid_download_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            blob = root / "blob.gguf"
            blob.write_bytes(b"NOPE")
            spec = HFModelSpec(repo_id="fake/repo", filename="tiny.gguf")

            with patch("llm.model_store.hf_hub_download", return_value=str(blob)):
                with self.assertRaises(ModelDownloadError):
                    ensure_model_downloaded(spec, models_dir=root / "models")

    def test_spec_requires_gguf_filename(self) -> None:
        with self.assertRaises(ValueError):
            HFModelSpec(repo_id="fake/repo", filename="model.bin")


class LLMConfigFromSettingsTests(unittest.TestCase):
    def test_uses_local_model_when_no_repo_is_configured(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            models_dir = Path(tmp)
            (models_dir / "pace.gguf").write_bytes(b"GGUF")
            settings = LLMSettings(model_path=str(models_dir), hf_filename="pace.gguf")

            config = LLMConfig.from_settings(settings)

            self.assertEqual(str((models_dir / "pace.gguf").absolute()), config.model_path)
            self.assertEqual(128, config.max_tokens)

    def test_missing_local_model_is_a_configuration_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings = LLMSettings(model_path=tmp, hf_filename="absent.gguf")
            with self.assertRaises(ConfigurationError):
                LLMConfig.from_settings(settings)


if __name__ == "__main__":
    unittest.main()
