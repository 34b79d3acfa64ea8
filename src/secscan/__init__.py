# SPDX-License-Identifier: MIT
"""secscan package metadata."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("secscan")
except PackageNotFoundError:
    __version__ = "2.1.0"
