import asyncio
import logging
import signal
import sys
from typing import Callable, Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    SecretConfig,
    load_app_config,
    load_secret_config,
    resolve_config_path,
)
from app_config_schema import PACE_BACKEND_LLM
from audio import AudioCueError, ChimePlayer, ChimeSpec, SoundDeviceAudioOutput
from llm import ConfigurationError, LLMConfig, PaceAssistantLLM
from pacing import LLMPaceAdvisor, PaceAdvisor, RulePaceAdvisor
from runtime import ChronoZenRuntime, RuntimeBootstrap, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("chronozen")


def setup_signal_handlers(request_stop: Callable[[], None]) -> None:
    """Stop the runtime gracefully on SIGTERM and SIGINT."""
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(signum, request_stop)
        except NotImplementedError:
            # Windows event loops do not support signal handlers.
            signal.signal(signum, lambda *_: loop.call_soon_threadsafe(request_stop))


def build_pace_advisor(
    app_config: AppConfig,
    secret_config: SecretConfig,
    logger: logging.Logger,
) -> tuple[PaceAdvisor, Optional[Callable[[], None]]]:
    """Return the configured advisor and its close hook.

    Raises:
        ConfigurationError: If the LLM backend is requested but cannot be loaded
    """
    if app_config.pace.enabled and app_config.pace.backend == PACE_BACKEND_LLM:
        llm_config = LLMConfig.from_settings(
            app_config.llm,
            hf_token=secret_config.hf_token,
            logger=logging.getLogger("llm.config"),
        )
        advisor = LLMPaceAdvisor(PaceAssistantLLM(llm_config), logger=logging.getLogger("pace"))
        logger.info("Pace advisor: LLM (model: %s)", llm_config.model_path)
        return advisor, advisor.close

    logger.info("Pace advisor: rules")
    return RulePaceAdvisor(), None


def build_chime(app_config: AppConfig, logger: logging.Logger) -> Optional[ChimePlayer]:
    settings = app_config.notifications
    if not settings.audio_enabled:
        return None
    try:
        spec = ChimeSpec(
            tone_hz=settings.tone_hz,
            tone_seconds=settings.tone_seconds,
            volume=settings.volume,
        )
    except AudioCueError as error:
        logger.warning("Completion chime disabled: %s", error)
        return None

    output = SoundDeviceAudioOutput(
        output_device_index=settings.output_device,
        logger=logging.getLogger("audio.output"),
    )
    return ChimePlayer(output, spec=spec, logger=logging.getLogger("audio"))


async def run_runtime(bootstrap: RuntimeBootstrap) -> int:
    runtime = ChronoZenRuntime(bootstrap, scheduler=asyncio.get_running_loop())
    return await runtime.run()


def main() -> int:
    """Run the ChronoZen timer service."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config(str(config_path))
        secret_config = load_secret_config()
        logger.info("Loaded runtime config: %s", config_path)
    except AppConfigurationError as error:
        logger.error(f"App configuration error: {error}")
        return 1

    try:
        pace_advisor, close_advisor = build_pace_advisor(app_config, secret_config, logger)
    except ConfigurationError as error:
        logger.error(f"LLM initialization error: {error}")
        return 1

    ui_server: Optional[UIServer] = None
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
        if ui_server_config.enabled:
            ui_server = UIServer(
                config=ui_server_config,
                logger=logging.getLogger("ui_server"),
            )
    except (ServerConfigurationError, OSError) as error:
        logger.error(f"UI server initialization error: {error}")
        if close_advisor is not None:
            close_advisor()
        return 1

    bootstrap = RuntimeBootstrap(
        logger=logger,
        app_config=app_config,
        pace_advisor=pace_advisor,
        ui_server=ui_server,
        chime=build_chime(app_config, logger),
        hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        close_advisor=close_advisor,
    )
    try:
        return asyncio.run(run_runtime(bootstrap))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by keyboard interrupt.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
