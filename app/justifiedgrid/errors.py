from __future__ import annotations


class JustifiedGridError(Exception):
    """Base class for layout and catalog errors."""


class InvalidConfigError(JustifiedGridError, ValueError):
    """Row height bounds or gutter are unusable."""


class InvalidImageError(JustifiedGridError, ValueError):
    """An image has a non-positive intrinsic width or height."""


class ManifestError(JustifiedGridError):
    """A manifest file or one of its entries could not be read."""
