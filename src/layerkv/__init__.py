"""
layerkv - In-memory key-value store with nested transactions.

A line-oriented store supporting GET/SET/DELETE/COUNT and arbitrarily deep
BEGIN/ROLLBACK/COMMIT, built on a chain of delta layers.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("layerkv")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "layerkv Contributors"

from layerkv.config import Settings  # noqa: E402
from layerkv.engine import Store  # noqa: E402
from layerkv.interpreter import Interpreter  # noqa: E402

__all__ = ["__version__", "__version_info__", "Interpreter", "Settings", "Store"]
