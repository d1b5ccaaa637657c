# io.py — audio output for rendered filter noise
# -----------------------------------------------
# WAV writing through soundfile and optional playback through
# sounddevice (extra "playback"). Paths are left to the caller.
# -----------------------------------------------
from __future__ import annotations

import pathlib

import numpy as np
import soundfile as sf
from loguru import logger

try:
    import sounddevice as sd  # optional runtime dependency
except (ImportError, OSError):  # pragma: no cover
    sd = None  # type: ignore

__all__ = ["save_wav", "play_audio"]


# ------------------------------------------------------------------
# WAV
# ------------------------------------------------------------------

def save_wav(data: np.ndarray, path: str | pathlib.Path, fs: int = 44_100,
             subtype: str = "PCM_16") -> pathlib.Path:
    """Write rendered filter output to a WAV file.

    Parameters
    ----------
    data : np.ndarray
        Float samples; limited to [-1, 1] before writing.
    path : str | Path
        Output file; missing parent folders are created.
    fs : int, default 44100
        Sample rate.
    subtype : str, default "PCM_16"
        Any WAV subtype soundfile accepts (``"PCM_24"``, ``"FLOAT"`` …).
        soundfile performs the float-to-integer conversion.
    """
    subtype = subtype.upper()
    if not sf.check_format("WAV", subtype):
        raise ValueError(f"WAV cannot hold subtype {subtype!r}")

    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    samples = np.clip(np.asarray(data, dtype=np.float64), -1.0, 1.0)
    sf.write(path, samples, fs, subtype=subtype)
    logger.info("saved {} ({}, {:.2f}s)", path, subtype, len(samples) / fs)
    return path


# ------------------------------------------------------------------
# Playback (optional)
# ------------------------------------------------------------------

def play_audio(data: np.ndarray, fs: int = 44_100, block: bool = True) -> bool:
    """Play *data* via sounddevice; returns False when it is not installed."""
    if sd is None:
        logger.warning("sounddevice not installed, playback skipped")
        return False
    sd.play(np.asarray(data, dtype=np.float32), samplerate=fs, blocking=block)
    return True
