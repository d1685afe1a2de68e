#!/usr/bin/env python3
"""Convenience runner for the track preview tool.

Usage:
    python run.py --input track.csv [--output-html preview.html]
"""
import logging
from track_simplify.config import LOG_FORMAT
from track_simplify.tools.preview_map import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    main()
