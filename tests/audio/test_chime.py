import unittest

import numpy as np

from audio import AudioCueError, ChimePlayer, ChimeSpec, SoundDeviceAudioOutput, synthesize_chime


class _RecordingOutput:
    def __init__(self) -> None:
        self.calls: list[tuple[np.ndarray, int]] = []

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        self.calls.append((wav, sample_rate_hz))


class ChimeSynthesisTests(unittest.TestCase):
    def test_chime_is_two_tones_of_configured_length(self) -> None:
        spec = ChimeSpec(tone_seconds=0.2, sample_rate_hz=8000)
        wav = synthesize_chime(spec)

        self.assertEqual(np.float32, wav.dtype)
        self.assertEqual(1, wav.ndim)
        self.assertEqual(2 * 1600, len(wav))

    def test_volume_bounds_amplitude_and_fades_start_silent(self) -> None:
        wav = synthesize_chime(ChimeSpec(volume=0.25, sample_rate_hz=8000))

        self.assertLessEqual(float(np.max(np.abs(wav))), 0.25 + 1e-6)
        self.assertAlmostEqual(0.0, float(wav[0]), places=6)

    def test_invalid_spec_is_rejected(self) -> None:
        for kwargs in ({"tone_hz": 0}, {"tone_seconds": -1.0}, {"volume": 0.0}, {"volume": 1.5}):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(AudioCueError):
                    ChimeSpec(**kwargs)


class ChimePlayerTests(unittest.TestCase):
    def test_play_forwards_cached_waveform(self) -> None:
        output = _RecordingOutput()
        player = ChimePlayer(output, spec=ChimeSpec(sample_rate_hz=8000))

        player.play()
        player.play()

        self.assertEqual(2, len(output.calls))
        first, second = output.calls
        self.assertIs(first[0], second[0])
        self.assertEqual(8000, first[1])


class SoundDeviceOutputValidationTests(unittest.TestCase):
    def test_rejects_non_mono_and_empty_buffers(self) -> None:
        output = SoundDeviceAudioOutput()

        with self.assertRaises(AudioCueError):
            output.play(np.zeros((4, 2), dtype=np.float32), 8000)
        with self.assertRaises(AudioCueError):
            output.play(np.zeros(0, dtype=np.float32), 8000)


if __name__ == "__main__":
    unittest.main()
