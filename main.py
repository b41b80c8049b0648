"""
Archive Listener - Design Projects archives background utility

A system tray application that:
1. Listens on port 8888 for requests to move a directory tree
2. Reports the total size of a directory tree

Usage:
    python main.py

Requirements:
    pip install -e .
"""

import sys
import os

# Add package root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from archive_listener.app import main

if __name__ == "__main__":
    sys.exit(main())
