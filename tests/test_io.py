"""Tests for soundfile-backed audio I/O."""

import numpy as np
import pytest
import soundfile as sf

from biresamp.audio.io import open_audio, read_frames, resolve_subtype, write_audio
from biresamp.core.errors import AudioIOError


@pytest.fixture
def stereo_wav(tmp_path):
    path = tmp_path / "stereo.wav"
    left = np.arange(0, 1000, 10, dtype=np.int16)
    right = -left
    sf.write(str(path), np.column_stack([left, right]), 22050, subtype="PCM_16")
    return path


class TestOpenAudio:
    """Tests for reading format metadata."""

    def test_metadata(self, stereo_wav):
        """Rate, channels, frames and format come from the file header."""
        info = open_audio(stereo_wav)
        assert info.sample_rate == 22050
        assert info.channels == 2
        assert info.frames == 100
        assert info.format == "WAV"
        assert info.subtype == "PCM_16"
        assert info.duration == pytest.approx(100 / 22050)

    def test_missing_file(self, tmp_path):
        """A missing file raises AudioIOError carrying its path."""
        with pytest.raises(AudioIOError) as exc_info:
            open_audio(tmp_path / "missing.wav")
        assert "missing.wav" in exc_info.value.path

    def test_not_audio(self, tmp_path):
        """Text with an audio extension cannot be decoded."""
        path = tmp_path / "notes.wav"
        path.write_text("definitely not RIFF data")
        with pytest.raises(AudioIOError):
            open_audio(path)


class TestReadFrames:
    """Tests for pulling one channel of 16-bit samples."""

    def test_first_channel(self, stereo_wav):
        """Channel 0 is read by default as a 1-D int16 array."""
        samples = read_frames(stereo_wav)
        assert samples.dtype == np.int16
        assert samples.ndim == 1
        assert samples.tolist() == list(range(0, 1000, 10))

    def test_selects_channel(self, stereo_wav):
        """Any existing channel can be selected."""
        samples = read_frames(stereo_wav, channel=1)
        assert samples.tolist() == [-v for v in range(0, 1000, 10)]

    def test_channel_out_of_range(self, stereo_wav):
        """A channel past the last one raises AudioIOError."""
        with pytest.raises(AudioIOError):
            read_frames(stereo_wav, channel=2)

    def test_missing_file(self, tmp_path):
        """A missing file raises AudioIOError."""
        with pytest.raises(AudioIOError):
            read_frames(tmp_path / "missing.wav")


class TestWriteAudio:
    """Tests for writing the mono result."""

    def test_mono_pcm16_wav(self, tmp_path):
        """WAV output is mono PCM_16 and keeps every sample."""
        path = tmp_path / "out.wav"
        samples = np.array([0, 100, -100, 32767, -32768], dtype=np.int16)
        write_audio(path, 16000, samples)

        info = sf.info(str(path))
        assert info.samplerate == 16000
        assert info.channels == 1
        assert info.subtype == "PCM_16"
        data, _ = sf.read(str(path), dtype="int16")
        assert data.tolist() == samples.tolist()

    def test_flac_container(self, tmp_path):
        """The container follows the output extension."""
        path = tmp_path / "out.flac"
        write_audio(path, 8000, np.zeros(800, dtype=np.int16))
        info = sf.info(str(path))
        assert info.format == "FLAC"
        assert info.samplerate == 8000

    def test_explicit_subtype(self, tmp_path):
        """An explicit subtype overrides the PCM_16 default."""
        path = tmp_path / "out.wav"
        write_audio(path, 8000, np.zeros(80, dtype=np.int16), subtype="PCM_24")
        assert sf.info(str(path)).subtype == "PCM_24"

    def test_unknown_extension_leaves_nothing(self, tmp_path):
        """An unknown format fails without leaving files behind."""
        path = tmp_path / "out.notaformat"
        with pytest.raises(AudioIOError):
            write_audio(path, 8000, np.zeros(80, dtype=np.int16))
        assert list(tmp_path.iterdir()) == []

    def test_failed_rename_removes_partial_output(self, tmp_path):
        """A failed final rename removes the temporary file."""
        # the destination is a directory, so the final rename fails
        path = tmp_path / "out.wav"
        path.mkdir()
        with pytest.raises(AudioIOError):
            write_audio(path, 8000, np.zeros(80, dtype=np.int16))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.wav"]

    def test_missing_directory(self, tmp_path):
        """Writing into a missing directory raises AudioIOError."""
        with pytest.raises(AudioIOError):
            write_audio(tmp_path / "nope" / "out.wav", 8000, np.zeros(8, dtype=np.int16))


class TestResolveSubtype:
    """Tests for choosing the output subtype."""

    def test_explicit_wins(self):
        """An explicit subtype is used unchanged."""
        assert resolve_subtype("a.wav", "PCM_24") == "PCM_24"

    def test_pcm16_where_supported(self):
        """PCM_16 is picked for containers that accept it."""
        assert resolve_subtype("a.wav") == "PCM_16"
        assert resolve_subtype("a.flac") == "PCM_16"

    def test_container_default_otherwise(self):
        """Containers without PCM_16 get their own default subtype."""
        if "OGG" not in sf.available_formats():
            pytest.skip("libsndfile built without OGG")
        assert resolve_subtype("a.ogg") == sf.default_subtype("OGG")

    def test_unknown_extension(self):
        """Unknown extensions resolve to no subtype."""
        assert resolve_subtype("a.notaformat") is None
