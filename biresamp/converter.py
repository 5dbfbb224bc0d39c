"""File-to-file conversion for biresamp.

Ties the pieces of one conversion together: open and fully load the
source, resample the selected channel, write the mono result. Nothing
outlives a single call.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from loguru import logger

from biresamp.audio.io import open_audio, read_frames, write_audio
from biresamp.audio.resampler import Resampler
from biresamp.config import ConverterConfig, load_config
from biresamp.core.models import ConversionResult, OverflowMode


def convert_file(
    input_path: str | Path,
    rate: int,
    output_path: str | Path,
    config: ConverterConfig | dict[str, Any] | str | Path | None = None,
) -> ConversionResult:
    """Resample ``input_path`` to ``rate`` Hz and write it to ``output_path``.

    Args:
        input_path: Source audio file.
        rate: Output sample rate in Hz.
        output_path: Destination; the container follows its extension.
        config: Anything :func:`biresamp.config.load_config` accepts.

    Returns:
        A ConversionResult describing the conversion.

    Raises:
        AudioIOError: If the input cannot be read or the output written.
        ValueError: If ``rate`` is not positive.
    """
    config = load_config(config)
    started = time.monotonic()

    info = open_audio(input_path)
    logger.info(
        f"Input: {input_path} ({info.format}/{info.subtype}, {info.sample_rate} Hz, "
        f"{info.channels} ch, {info.frames} frames)"
    )

    resampler = Resampler(
        info.sample_rate,
        rate,
        overflow=config.resample.overflow,
        block_size=config.resample.block_size,
    )

    samples = read_frames(input_path, channel=config.resample.channel)
    output = resampler.process(samples)

    if resampler.last_overflow_count:
        action = "saturated" if config.resample.overflow == OverflowMode.SATURATE else "wrapped"
        logger.warning(
            f"{resampler.last_overflow_count} samples exceeded the 16-bit range and were {action}"
        )

    write_audio(output_path, rate, output, subtype=config.output.subtype)

    result = ConversionResult(
        input_path=str(input_path),
        output_path=str(output_path),
        input_rate=info.sample_rate,
        output_rate=rate,
        input_frames=len(samples),
        output_frames=len(output),
        channel=config.resample.channel,
        overflow=config.resample.overflow,
        out_of_range=resampler.last_overflow_count,
        elapsed=time.monotonic() - started,
    )
    logger.info(
        f"Output: {output_path} ({result.output_frames} frames at {rate} Hz) "
        f"in {result.elapsed:.2f}s"
    )
    return result
