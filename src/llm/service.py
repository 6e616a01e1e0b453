import logging
from pathlib import Path

from .config import LLMConfig
from .llama_backend import LlamaBackend
from .parser import PACE_FIELD, REASONING_FIELD, PaceResponseParser
from .types import PaceAdvice, PaceRequest


class PaceAssistantLLM:
    """Blocking pace advisor backed by a local llama.cpp model."""

    def __init__(self, config: LLMConfig):
        self._logger = logging.getLogger(__name__)
        self._config = config
        self._backend = LlamaBackend(config)
        self._parser = PaceResponseParser()
        self._system_prompt_template = self._build_system_message()

    def _build_system_message(self) -> str:
        path = (self._config.system_prompt_path or "").strip()
        if not path:
            return self._default_system_message()

        prompt_file = Path(path).expanduser()
        try:
            content = prompt_file.read_text(encoding="utf-8").strip()
        except OSError as error:
            self._logger.warning(
                "Failed to read pace system prompt %s (%s). Falling back to default.",
                prompt_file,
                error,
            )
            return self._default_system_message()

        if not content:
            self._logger.warning("Pace system prompt file is empty: %s", prompt_file)
            return self._default_system_message()
        return content

    @staticmethod
    def _default_system_message() -> str:
        return (
            "Vous êtes un expert en UX et en rythme d'animation.\n"
            "Compte tenu du temps sélectionné et du temps restant d'un compte à rebours, "
            "déterminez une vitesse d'animation appropriée pour l'animation de progression.\n"
            "La vitesse d'animation doit être une valeur comprise entre 0 et 1, "
            "où 0 signifie en pause et 1 signifie vitesse normale.\n"
            "Considérez ce qui suit :\n"
            "- Si le temps restant est très faible par rapport au temps sélectionné, "
            "la vitesse d'animation doit être plus rapide pour que l'utilisateur sache "
            "quand le temps est écoulé.\n"
            "- Si le temps restant est élevé, la vitesse d'animation doit être normale "
            "ou légèrement plus lente.\n"
            "Répondez uniquement avec du JSON valide :\n"
            f'{{ "{PACE_FIELD}": number, "{REASONING_FIELD}": string }}\n'
        )

    def advise(self, selected_seconds: int, remaining_seconds: int) -> PaceAdvice:
        """Ask the model for a pace; raises ``PaceResponseError`` on bad output."""
        request: PaceRequest = {
            "selected_seconds": int(selected_seconds),
            "remaining_seconds": int(remaining_seconds),
        }
        messages = [
            {"role": "system", "content": self._system_prompt_template},
            {"role": "user", "content": self._render_user_message(request)},
        ]
        content = self._backend.complete(messages, max_tokens=self._config.max_tokens)
        self._logger.debug("Pace model output: %s", content)
        return self._parser.parse(content)

    @staticmethod
    def _render_user_message(request: PaceRequest) -> str:
        return (
            f"Temps sélectionné : {request['selected_seconds']} secondes\n"
            f"Temps restant : {request['remaining_seconds']} secondes\n"
            "Raisonnement :"
        )
