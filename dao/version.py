"""
dao.version — semantic version string.

Kept tiny and dependency-free so it can be imported during packaging.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"


@lru_cache(maxsize=1)
def version_metadata() -> Dict[str, str]:
    """Structured version info for logs / diagnostics."""
    from .config import summary

    return {"version": __version__, "config": summary()}
