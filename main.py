#!/usr/bin/env python3
"""Run the waveform finder from the project root.

Usage:
    uv run python main.py input.wav [--preset presets/piano.json]
    uv run python -m waveform_finder.main input.wav
"""

if __name__ == "__main__":
    from waveform_finder.main import main
    main()
