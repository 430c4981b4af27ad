#!/usr/bin/env python3
"""
Main entry point for the Video Browser.

This script starts the HTTP server that streams and transcodes the local
video library.
"""

import sys
import os

# Add the current directory to Python path to import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from video_browser.main import main

if __name__ == "__main__":
    main()
