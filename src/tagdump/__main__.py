"""
Main entry point for running tagdump as a module.
Allows: python -m tagdump FILE
"""
import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
