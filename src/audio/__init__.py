"""Public exports for the completion chime."""

from .cue import ChimePlayer, ChimeSpec, synthesize_chime
from .output import AudioCueError, SoundDeviceAudioOutput

__all__ = [
    "AudioCueError",
    "ChimePlayer",
    "ChimeSpec",
    "SoundDeviceAudioOutput",
    "synthesize_chime",
]
