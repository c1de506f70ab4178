"""Audio I/O: WAV files <-> flat mono int32 sample sequences.

The detector works on signed 32-bit integer samples, so every file format is
rescaled to the int32 range on the way in.
"""

import numpy as np
from scipy.io import wavfile

INT32_MAX = 2147483647


def to_int32(data) -> np.ndarray:
    """Rescale any wavfile sample type to int32, mono (channels averaged)."""
    data = np.asarray(data)
    if data.dtype == np.int32:
        audio = data.astype(np.int64)
    elif data.dtype == np.int16:
        audio = data.astype(np.int64) << 16
    elif data.dtype == np.uint8:
        audio = (data.astype(np.int64) - 128) << 24
    elif np.issubdtype(data.dtype, np.floating):
        audio = np.round(np.clip(data.astype(np.float64), -1.0, 1.0) * INT32_MAX).astype(np.int64)
    else:
        raise ValueError(f"unsupported sample type {data.dtype}")

    # Stereo to mono
    if audio.ndim == 2:
        audio = audio.sum(axis=1) // audio.shape[1]

    return audio.astype(np.int32)


def load_samples(path):
    """Load a WAV file as a mono int32 array.

    Returns (samples, sample_rate).
    """
    sr, data = wavfile.read(path)
    return to_int32(data), sr


def save_samples(path, samples, sr=44100):
    """Save an int32 sample sequence as a 32-bit PCM WAV file."""
    wavfile.write(path, sr, np.asarray(samples, dtype=np.int32))
