"""Resize policies applied by ImageProcessor.

A policy is any callable taking a decoded Pillow image and a non-empty,
already validated geometry string and returning the transformed image.
ImageProcessor only decodes, converts and encodes; what happens to the
pixels in between is decided here, so a different crop or resize strategy
is swapped in by passing another callable.
"""

from collections.abc import Callable

from PIL import Image, ImageOps

from image_attach.utils.geometry import Geometry, is_fixed_geometry, parse_geometry

ResizePolicy = Callable[[Image.Image, str], Image.Image]

RESAMPLING = Image.Resampling.LANCZOS


def normalize(image: Image.Image) -> Image.Image:
    """Apply the EXIF orientation to the pixels, then drop all metadata."""
    oriented = ImageOps.exif_transpose(image) or image
    if oriented is image:
        oriented = image.copy()
    oriented.info.clear()
    return oriented


def proportional_size(size: tuple[int, int], geometry: Geometry) -> tuple[int, int]:
    """Compute the aspect-preserving target size for a proportional geometry.

    Modifiers:
        none  fit inside the box (may enlarge)
        ">"   only shrink images larger than the box
        "<"   only enlarge images smaller than the box
        "^"   cover the box (the smaller side matches)
        "%"   scale by percentage; a missing dimension reuses the other
        "@"   scale to the pixel area given by the present dimensions
    Offsets are ignored, as they are for a plain resize.
    """
    width, height = size

    if geometry.is_empty:
        return size

    if geometry.modifier == "%":
        x_percent = geometry.width if geometry.width is not None else geometry.height
        y_percent = geometry.height if geometry.height is not None else x_percent
        return (
            max(1, round(width * (x_percent or 0) / 100)),
            max(1, round(height * (y_percent or 0) / 100)),
        )

    if geometry.modifier == "@":
        area = (geometry.width or 1) * (geometry.height or 1)
        scale = (area / (width * height)) ** 0.5
        return max(1, int(width * scale)), max(1, int(height * scale))

    factors = []
    if geometry.width is not None:
        factors.append(geometry.width / width)
    if geometry.height is not None:
        factors.append(geometry.height / height)

    scale = max(factors) if geometry.modifier == "^" else min(factors)

    if geometry.modifier == ">" and scale >= 1:
        return size
    if geometry.modifier == "<" and scale <= 1:
        return size

    return max(1, round(width * scale)), max(1, round(height * scale))


def proportional_only(image: Image.Image, geometry: str) -> Image.Image:
    """Orient, strip and resize preserving aspect ratio; never crop."""
    return _resize_proportionally(image, parse_geometry(geometry))


def _resize_proportionally(image: Image.Image, geometry: Geometry) -> Image.Image:
    image = normalize(image)
    target = proportional_size(image.size, geometry)
    if target == image.size:
        return image
    return image.resize(target, RESAMPLING)


def crop_to_fill(image: Image.Image, geometry: str) -> Image.Image:
    """Default policy.

    Fixed geometries (``WxH`` / ``WxH!``) produce exactly ``W`` by ``H``
    pixels: the image is scaled to cover the box and center cropped, so it
    is never distorted. Any other geometry, or a fixed one with a zero
    dimension, falls back to a proportional resize.
    """
    parsed = parse_geometry(geometry)
    if not is_fixed_geometry(geometry) or parsed.width is None or parsed.height is None:
        return _resize_proportionally(image, parsed)

    image = normalize(image)
    return ImageOps.fit(image, (parsed.width, parsed.height), method=RESAMPLING, centering=(0.5, 0.5))
