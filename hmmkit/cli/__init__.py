"""
Command-line interface module.

CLI tools for scoring, decoding and re-estimating HMMs from files.
"""

from .main import app

__all__ = [
    "app"
]
