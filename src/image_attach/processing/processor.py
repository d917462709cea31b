"""Pillow-backed image processor.

ImageProcessor owns the mechanical steps (decode, format conversion, encode)
and delegates the geometry transform to an injected resize policy.
"""

import io
import os
from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO

from aws_lambda_powertools import Logger
from PIL import Image, UnidentifiedImageError

from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import InvalidGeometryError, ProcessorError
from image_attach.processing.policies import ResizePolicy, crop_to_fill
from image_attach.utils.constants import (
    INVALID_IMAGE_DATA_MESSAGE,
    QUALITY_FORMATS,
    RGB_ONLY_FORMATS,
)
from image_attach.utils.geometry import is_valid_geometry

ImageSource = str | os.PathLike | bytes | bytearray | BinaryIO

# Everything Pillow raises for data it cannot decode
DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)

logger = Logger(utc=True)


def _describe(source: ImageSource) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return type(source).__name__


def _open_source(source: ImageSource) -> Any:
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    if hasattr(source, "seek"):
        source.seek(0)
    return source


def _read_source(source: ImageSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        return Path(source).read_bytes()
    source.seek(0)
    return source.read()


class ProcessedImage:
    """A decoded, transformed image waiting to be encoded to disk.

    ``original`` holds the source bytes when neither a geometry nor a format
    conversion applied; write() then copies them unchanged.
    """

    def __init__(
        self,
        image: Image.Image,
        *,
        output_format: str,
        quality: int | None = None,
        original: bytes | None = None,
    ) -> None:
        self.image = image
        self.format = output_format
        self.quality = quality
        self.original = original

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def write(self, path: str | os.PathLike) -> Path:
        """Encode the image to ``path`` and return it."""
        destination = Path(path)

        if self.original is not None:
            destination.write_bytes(self.original)
            logger.debug(
                "Source image written unchanged",
                extra={"path": str(destination), "size": self.size, "format": self.format},
            )
            return destination

        params: dict[str, Any] = {"format": self.format}

        if self.quality is not None and self.format in QUALITY_FORMATS:
            params["quality"] = self.quality

        # Metadata survives only when no geometry was applied
        for key in ("exif", "icc_profile"):
            if self.image.info.get(key):
                params[key] = self.image.info[key]

        self.image.save(destination, **params)

        logger.debug(
            "Processed image written",
            extra={"path": str(destination), "size": self.size, "format": self.format},
        )
        return destination

    def close(self) -> None:
        self.image.close()

    def __enter__(self) -> "ProcessedImage":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class ImageProcessor:
    """Decode, convert and resize images according to an AttachmentConfig."""

    def __init__(self, config: AttachmentConfig, policy: ResizePolicy = crop_to_fill) -> None:
        self._config = config
        self._policy = policy

    @staticmethod
    def is_valid_image(source: ImageSource) -> bool:
        """Return True if ``source`` fully decodes as an image.

        Corrupt or non-image data is reported as False, never raised.
        """
        try:
            with Image.open(_open_source(source)) as image:
                image.load()
        except DECODE_ERRORS as exc:
            logger.info(
                "Image failed to decode",
                extra={"source": _describe(source), "error": str(exc)},
            )
            return False

        return True

    def resize(self, source: ImageSource, geometry: str) -> ProcessedImage:
        """Produce the processed image for one output.

        Args:
            source: Path, raw bytes or binary stream of the input image
            geometry: Geometry string; empty means no resize

        Returns:
            ProcessedImage ready to be written

        Raises:
            InvalidGeometryError: If ``geometry`` is non-empty and malformed
            ProcessorError: If the input cannot be decoded or transformed
        """
        if geometry and not is_valid_geometry(geometry):
            raise InvalidGeometryError(
                message=f'"{geometry}" is not a valid geometry string',
                details={"geometry": geometry},
            )

        try:
            image, detected_format = self._decode(source)
            unchanged = not geometry and detected_format == self._config.output_format
            image = self._convert(image, detected_format)

            if geometry:
                image = self._policy(image, geometry)

        except DECODE_ERRORS as exc:
            logger.warning(
                "Unable to process image",
                extra={"source": _describe(source), "error": str(exc)},
            )
            raise ProcessorError(
                message=INVALID_IMAGE_DATA_MESSAGE,
                details={"source": _describe(source)},
            ) from exc

        return ProcessedImage(
            image,
            output_format=self._config.output_format,
            quality=self._config.output_quality if geometry else None,
            original=_read_source(source) if unchanged else None,
        )

    @staticmethod
    def _decode(source: ImageSource) -> tuple[Image.Image, str | None]:
        with Image.open(_open_source(source)) as opened:
            opened.load()
            detected_format = opened.format
            image = opened.copy()

        return image, detected_format

    def _convert(self, image: Image.Image, detected_format: str | None) -> Image.Image:
        output_format = self._config.output_format
        if detected_format == output_format:
            return image

        logger.debug(
            "Converting image",
            extra={"from_format": detected_format, "to_format": output_format},
        )

        if output_format in RGB_ONLY_FORMATS and image.mode not in ("RGB", "L"):
            return self._flatten(image)

        if image.mode == "CMYK":
            return image.convert("RGB")

        return image

    @staticmethod
    def _flatten(image: Image.Image) -> Image.Image:
        """Composite any transparency onto white and return an RGB image."""
        has_alpha = image.mode in ("RGBA", "LA") or (
            image.mode == "P" and "transparency" in image.info
        )
        if not has_alpha:
            return image.convert("RGB")

        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        background.info = {
            key: value for key, value in image.info.items() if key in ("exif", "icc_profile")
        }
        return background
