"""
Entry point for running the API as a module.

Usage:
    python -m suiquest_api serve
"""

from suiquest_api.cli import main

if __name__ == "__main__":
    main()
