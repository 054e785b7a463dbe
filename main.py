#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch

Or render a single file:

    python -m photo_mosaic.cli single my_photo.jpg --tile-width 16 --tile-height 16
    python -m photo_mosaic.cli single my_photo.jpg --resolver http --server http://localhost:8765
"""

from photo_mosaic.cli import app

if __name__ == "__main__":
    app()
