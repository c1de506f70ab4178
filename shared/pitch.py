"""Pitch of a detected waveform: period in samples -> Hz -> nearest note."""

import numpy as np

NOTE_NAMES = ['C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B']
A4_HZ = 440.0
A4_MIDI = 69


def period_to_freq(period_samples: int, sr: int = 44100) -> float:
    """Fundamental of a waveform `period_samples` long. 0.0 for no period."""
    if period_samples <= 0:
        return 0.0
    return sr / period_samples


def freq_to_period(freq: float, sr: int = 44100) -> float:
    if freq <= 0:
        return 0.0
    return sr / freq


def freq_to_midi(freq: float) -> float:
    if freq <= 0:
        return 0.0
    return A4_MIDI + 12.0 * float(np.log2(freq / A4_HZ))


def midi_to_freq(midi: float) -> float:
    return A4_HZ * 2.0 ** ((midi - A4_MIDI) / 12.0)


def nearest_note(freq: float):
    """(name, octave, cents) of the equal-tempered note closest to `freq`."""
    midi = freq_to_midi(freq)
    note = int(round(midi))
    cents = int(round((midi - note) * 100))
    return NOTE_NAMES[note % 12], note // 12 - 1, cents


def hz_to_note(freq: float) -> str:
    """e.g. 'A4', or 'A4+31c' when more than 5 cents off."""
    if freq <= 0:
        return '---'
    name, octave, cents = nearest_note(freq)
    label = f'{name}{octave}'
    if abs(cents) >= 5:
        label += f'{cents:+d}c'
    return label


def period_to_note(period_samples: int, sr: int = 44100) -> str:
    return hz_to_note(period_to_freq(period_samples, sr))
