"""biresamp - offline bandlimited interpolation sample rate converter.

Resamples audio files by evaluating a Kaiser-windowed sinc interpolant of
the input at each output instant.

Quick start (command line):
    $ pip install biresamp
    $ biresamp input.wav 16000 output.wav

Quick start (programmatic):
    from biresamp import Resampler, convert_file

    result = convert_file("input.wav", 16000, "output.wav")
    print(result.output_frames)

    resampler = Resampler(from_rate=48000, to_rate=16000)
    out = resampler.process(samples)   # int16 numpy array
"""

__version__ = "0.1.0"

# Core
from biresamp.config import ConverterConfig, load_config
from biresamp.converter import convert_file
from biresamp.core.errors import AudioIOError, BiresampError, BoundsError, UsageError
from biresamp.core.models import AudioInfo, ConversionResult, OverflowMode

# Audio
from biresamp.audio.io import open_audio, read_frames, write_audio
from biresamp.audio.resampler import Resampler, output_length, padding_frames, resample

# Filters
from biresamp.filters import FilterTable, design_filter

__all__ = [
    # Core
    "ConverterConfig",
    "load_config",
    "convert_file",
    "BiresampError",
    "UsageError",
    "AudioIOError",
    "BoundsError",
    "AudioInfo",
    "ConversionResult",
    "OverflowMode",
    # Audio
    "open_audio",
    "read_frames",
    "write_audio",
    "Resampler",
    "resample",
    "output_length",
    "padding_frames",
    # Filters
    "FilterTable",
    "design_filter",
]
