"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hugin")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = ["__version__"]
