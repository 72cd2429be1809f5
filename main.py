#!/usr/bin/env python3
"""
main.py - quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch

Or split a single file:

    python -m puzzle_splitter.cli split my_photo.jpg --rows 4 --cols 5
    python -m puzzle_splitter.cli info my_photo.jpg -r 3 -c 3
"""

from puzzle_splitter.cli import app

if __name__ == "__main__":
    app()
