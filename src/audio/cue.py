"""Synthesized two-tone completion chime."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from .output import AudioCueError

DEFAULT_SAMPLE_RATE_HZ = 22050
_FADE_SECONDS = 0.01


class AudioOutputLike(Protocol):
    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        ...


@dataclass(frozen=True)
class ChimeSpec:
    tone_hz: float = 880.0
    tone_seconds: float = 0.35
    volume: float = 0.3
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ

    def __post_init__(self) -> None:
        if self.tone_hz <= 0:
            raise AudioCueError(f"tone_hz must be positive, got: {self.tone_hz}")
        if self.tone_seconds <= 0:
            raise AudioCueError(f"tone_seconds must be positive, got: {self.tone_seconds}")
        if not 0.0 < self.volume <= 1.0:
            raise AudioCueError(f"volume must be in (0, 1], got: {self.volume}")


def synthesize_chime(spec: ChimeSpec) -> np.ndarray:
    """Two sine tones (root then fifth) with short linear fades."""
    samples = int(spec.sample_rate_hz * spec.tone_seconds)
    t = np.arange(samples, dtype=np.float32) / spec.sample_rate_hz

    fade = min(samples // 2, int(spec.sample_rate_hz * _FADE_SECONDS))
    envelope = np.ones(samples, dtype=np.float32)
    if fade > 0:
        ramp = np.linspace(0.0, 1.0, fade, dtype=np.float32)
        envelope[:fade] = ramp
        envelope[-fade:] = ramp[::-1]

    tones = [
        np.sin(2 * np.pi * frequency * t) * envelope
        for frequency in (spec.tone_hz, spec.tone_hz * 1.5)
    ]
    return (np.concatenate(tones) * spec.volume).astype(np.float32)


class ChimePlayer:
    """Plays the completion chime; the waveform is built once."""

    def __init__(
        self,
        output: AudioOutputLike,
        *,
        spec: Optional[ChimeSpec] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._output = output
        self._spec = spec or ChimeSpec()
        self._wav = synthesize_chime(self._spec)
        self._logger = logger or logging.getLogger("audio")

    def play(self) -> None:
        self._logger.debug("Playing completion chime (%d samples)", len(self._wav))
        self._output.play(self._wav, self._spec.sample_rate_hz)
