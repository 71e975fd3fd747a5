"""
Trackers — Process-wide write-time registries

- mixin: which class was composed into which, where
- definition: extra definition sites for dynamically built objects
"""

from . import definition, mixin
from .mixin import MixinKind

__all__ = ["definition", "mixin", "MixinKind"]
