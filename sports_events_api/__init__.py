"""
Top-level package for the Sports Events API.

All functionality lives in submodules under ``app``; the package itself
exports nothing.
"""

__all__ = []
