#!/usr/bin/env python3
"""Waveform finder — periodic waveform detection over a WAV file."""

import logging
import sys

from waveform_finder.audio.analyse import main as analyse

logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")


def main():
    sys.exit(analyse())


if __name__ == "__main__":
    main()
