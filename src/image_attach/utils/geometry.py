"""Geometry string validation and parsing.

A geometry string describes a resize target in the compact form
``<width>x<height>{+-}<xoffset>{+-}<yoffset>{%@!<>^}``. Both dimensions
may be omitted. Only ``WxH`` and ``WxH!`` are "fixed" geometries; everything
else is proportional.
"""

import re
from dataclasses import dataclass

from image_attach.models.errors import InvalidGeometryError
from image_attach.utils.constants import FIXED_GEOMETRY_PATTERN, GEOMETRY_PATTERN

_GEOMETRY_RE = re.compile(GEOMETRY_PATTERN)
_FIXED_GEOMETRY_RE = re.compile(FIXED_GEOMETRY_PATTERN)


@dataclass(frozen=True)
class Geometry:
    """Parsed components of a geometry string."""

    width: int | None
    height: int | None
    x_offset: int = 0
    y_offset: int = 0
    modifier: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.width is None and self.height is None


def is_valid_geometry(spec: str) -> bool:
    """Return True if ``spec`` is empty or matches the geometry grammar."""
    if spec == "":
        return True
    return _GEOMETRY_RE.match(spec) is not None


def is_fixed_geometry(spec: str) -> bool:
    """Return True for exact ``WxH`` or ``WxH!`` geometries."""
    return _FIXED_GEOMETRY_RE.match(spec) is not None


def validate_geometry(spec: str) -> str:
    """Return ``spec`` unchanged or raise InvalidGeometryError."""
    if not is_valid_geometry(spec):
        raise InvalidGeometryError(
            message=f'"{spec}" is not a valid geometry string',
            details={"geometry": spec},
        )
    return spec


def _dimension(value: str | None) -> int | None:
    # A zero dimension counts as absent
    return (int(value) or None) if value else None


def parse_geometry(spec: str) -> Geometry:
    """Split a non-empty geometry string into its components.

    A zero width or height is treated as missing, so ``0x100`` parses like
    ``x100``.

    Raises:
        InvalidGeometryError: If ``spec`` does not match the grammar
    """
    match = _GEOMETRY_RE.match(spec)
    if match is None:
        raise InvalidGeometryError(
            message=f'"{spec}" is not a valid geometry string',
            details={"geometry": spec},
        )

    return Geometry(
        width=_dimension(match.group("width")),
        height=_dimension(match.group("height")),
        x_offset=int(match.group("x_offset") or 0),
        y_offset=int(match.group("y_offset") or 0),
        modifier=match.group("modifier"),
    )
