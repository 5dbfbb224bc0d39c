"""End-to-end tests for file conversion."""

import numpy as np
import pytest
import soundfile as sf

from biresamp.converter import convert_file
from biresamp.core.errors import AudioIOError
from biresamp.core.models import ConversionResult, OverflowMode


def write_sine(path, freq, rate, seconds, amplitude=16000, channels=1):
    n = np.arange(int(rate * seconds))
    tone = np.round(amplitude * np.sin(2 * np.pi * freq * n / rate)).astype(np.int16)
    if channels > 1:
        data = np.column_stack([tone] + [np.zeros_like(tone)] * (channels - 1))
    else:
        data = tone
    sf.write(str(path), data, rate, subtype="PCM_16")
    return tone


class TestConvertFile:
    """Tests for convert_file from input file to output file."""

    def test_1khz_sine_48k_to_16k(self, tmp_path):
        """A 1 kHz tone at 48 kHz keeps its frequency at 16 kHz."""
        src = tmp_path / "sine48k.wav"
        dst = tmp_path / "sine16k.wav"
        write_sine(src, 1000, 48000, 1.0)

        result = convert_file(src, 16000, dst)

        assert isinstance(result, ConversionResult)
        assert result.input_rate == 48000
        assert result.output_rate == 16000
        assert result.input_frames == 48000
        assert result.output_frames == 16000

        info = sf.info(str(dst))
        assert info.samplerate == 16000
        assert info.channels == 1
        assert info.frames == 16000
        assert info.subtype == "PCM_16"

        data, _ = sf.read(str(dst), dtype="int16")
        spectrum = np.abs(np.fft.rfft(data.astype(np.float64)))
        freqs = np.fft.rfftfreq(len(data), d=1.0 / 16000)
        assert abs(freqs[np.argmax(spectrum)] - 1000.0) <= 5.0

    def test_upsample_44k1_to_48k(self, tmp_path):
        """Upsampling writes floor(frames * 48000 / 44100) frames."""
        src = tmp_path / "in.wav"
        dst = tmp_path / "out.wav"
        write_sine(src, 440, 44100, 0.5)

        result = convert_file(src, 48000, dst)
        assert result.output_frames == 22050 * 48000 // 44100
        assert sf.info(str(dst)).frames == result.output_frames

    def test_only_first_channel_by_default(self, tmp_path):
        """Only channel 0 of a stereo file is converted by default."""
        src = tmp_path / "stereo.wav"
        dst = tmp_path / "mono.wav"
        write_sine(src, 440, 8000, 0.25, channels=2)

        convert_file(src, 16000, dst)
        data, _ = sf.read(str(dst), dtype="int16")
        assert data.ndim == 1
        assert np.abs(data).max() > 10000

    def test_selected_channel(self, tmp_path):
        """The configured channel is the one converted."""
        src = tmp_path / "stereo.wav"
        dst = tmp_path / "mono.wav"
        write_sine(src, 440, 8000, 0.25, channels=2)

        result = convert_file(src, 16000, dst, {"channel": 1})
        data, _ = sf.read(str(dst), dtype="int16")
        assert result.channel == 1
        # second channel is silent
        assert not data.any()

    def test_overflow_mode_reported(self, tmp_path):
        """The result reports the overflow mode and out-of-range count."""
        src = tmp_path / "in.wav"
        dst = tmp_path / "out.wav"
        write_sine(src, 440, 8000, 0.1)

        result = convert_file(src, 16000, dst, {"overflow": "wrap"})
        assert result.overflow == OverflowMode.WRAP
        assert result.out_of_range == 0

    def test_missing_input(self, tmp_path):
        """A missing input raises AudioIOError and writes nothing."""
        dst = tmp_path / "out.wav"
        with pytest.raises(AudioIOError):
            convert_file(tmp_path / "missing.wav", 16000, dst)
        assert not dst.exists()

    def test_unwritable_output_leaves_nothing(self, tmp_path):
        """A failed write leaves only the input behind."""
        src = tmp_path / "in.wav"
        write_sine(src, 440, 8000, 0.1)
        with pytest.raises(AudioIOError):
            convert_file(src, 16000, tmp_path / "out.notaformat")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["in.wav"]
