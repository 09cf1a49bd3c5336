"""Exceptions raised while hydrating serialized regions."""
from __future__ import annotations


class RegionDecodeError(ValueError):
    """A serialized region record is malformed or internally inconsistent."""
