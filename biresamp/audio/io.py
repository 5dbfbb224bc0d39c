"""Audio file I/O for biresamp, backed by libsndfile via soundfile.

Only the boundary of a conversion lives here: reading format metadata,
pulling one channel of 16-bit samples out of the source, and writing a
mono result. Container and codec follow the output file's extension.
"""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np
import soundfile as sf
from loguru import logger

from biresamp.core.errors import AudioIOError
from biresamp.core.models import AudioInfo

DEFAULT_SUBTYPE = "PCM_16"

# Failures libsndfile reports for unreadable/unwritable files and unknown formats
_SF_ERRORS = (sf.LibsndfileError, RuntimeError, TypeError, ValueError, OSError)


def open_audio(path: str | Path) -> AudioInfo:
    """Read the format metadata of an audio file.

    Raises:
        AudioIOError: If the file cannot be opened or decoded.
    """
    try:
        info = sf.info(str(path))
    except _SF_ERRORS as e:
        raise AudioIOError(f"could not open input file: {path}: {e}", str(path)) from e

    return AudioInfo(
        sample_rate=info.samplerate,
        channels=info.channels,
        frames=info.frames,
        format=info.format,
        subtype=info.subtype,
    )


def read_frames(path: str | Path, channel: int = 0) -> np.ndarray:
    """Read every frame of one channel as int16 samples.

    Args:
        path: Input audio file.
        channel: Zero-based channel index to extract.

    Returns:
        1-D int16 array of the selected channel.

    Raises:
        AudioIOError: If the file cannot be decoded or has no such channel.
    """
    try:
        data, _ = sf.read(str(path), dtype="int16", always_2d=True)
    except _SF_ERRORS as e:
        raise AudioIOError(f"could not read input file: {path}: {e}", str(path)) from e

    channels = data.shape[1]
    if channel < 0 or channel >= channels:
        raise AudioIOError(
            f"channel {channel} out of range for {path} ({channels} channel(s))", str(path)
        )

    return np.ascontiguousarray(data[:, channel])


def resolve_subtype(path: str | Path, subtype: str | None = None) -> str | None:
    """Pick the output subtype for ``path``.

    An explicit subtype wins. Otherwise 16-bit PCM where the container
    supports it, else the container's default (``None`` lets libsndfile
    decide, and fails later for an unknown extension).
    """
    if subtype:
        return subtype

    fmt = Path(path).suffix.lstrip(".").upper()
    if fmt not in sf.available_formats():
        return None
    if sf.check_format(fmt, DEFAULT_SUBTYPE):
        return DEFAULT_SUBTYPE
    return sf.default_subtype(fmt)


def write_audio(
    path: str | Path,
    sample_rate: int,
    samples: np.ndarray,
    subtype: str | None = None,
) -> None:
    """Write mono samples to ``path``.

    The data goes to a hidden sibling file first and is renamed into place
    once complete, so a failed write never leaves partial output behind.

    Raises:
        AudioIOError: If the file cannot be created or encoded.
    """
    path = Path(path)
    tmp = path.with_name(f".{path.stem}.partial{path.suffix}")
    subtype = resolve_subtype(path, subtype)
    fmt = path.suffix.lstrip(".").upper() or None

    try:
        sf.write(str(tmp), samples, sample_rate, subtype=subtype, format=fmt)
        os.replace(tmp, path)
    except _SF_ERRORS as e:
        _discard(tmp)
        raise AudioIOError(f"could not write output file: {path}: {e}", str(path)) from e

    logger.debug(f"Wrote {len(samples)} frames at {sample_rate} Hz to {path} ({subtype})")


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial output {path}: {e}")
