"""Sounddevice-backed playback for completion chimes."""

import logging
from typing import Optional

import numpy as np


class AudioCueError(Exception):
    """Raised when a chime cannot be synthesized or played."""


class SoundDeviceAudioOutput:
    """Plays mono float PCM arrays through a selected sounddevice output."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        blocksize: int = 1024,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger("audio")

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        """Play ``wav`` and block until it has finished."""
        if wav.ndim != 1:
            raise AudioCueError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise AudioCueError("Cannot play empty audio buffer")

        # PortAudio may be missing on headless hosts; import at playback time.
        try:
            import sounddevice as sd
        except (ImportError, OSError) as error:
            raise AudioCueError(f"sounddevice is unavailable: {error}") from error

        pos = 0

        def callback(outdata, frames, time_info, status):
            nonlocal pos
            if status:
                self._logger.warning("Sounddevice status: %s", status)

            chunk = wav[pos : pos + frames]
            outdata[: len(chunk), 0] = chunk
            if len(chunk) < frames:
                outdata[len(chunk) :, 0] = 0
                raise sd.CallbackStop()
            pos += frames

        try:
            with sd.OutputStream(
                channels=1,
                samplerate=sample_rate_hz,
                blocksize=self._blocksize,
                dtype="float32",
                callback=callback,
                device=self._output_device_index,
            ):
                sd.sleep(int(len(wav) / sample_rate_hz * 1000) + 200)
        except Exception as error:
            raise AudioCueError(f"Audio playback failed: {error}") from error
