#!/usr/bin/env python3
"""
ARCADE_LOOP Launcher
=====================
Run this script to start a game: python run.py [dodge|dash|catch]
"""

from arcade_loop.main import main

if __name__ == "__main__":
    main()
