"""
Top-level package for the Pet Market API.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
