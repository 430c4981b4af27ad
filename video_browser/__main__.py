"""
Entry point for running the Video Browser as a module.
"""

from .main import main

if __name__ == "__main__":
    main()
