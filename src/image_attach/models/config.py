"""Attachment configuration model.

One AttachmentConfig is built per record type and passed explicitly to the
storage, processor and lifecycle objects that need it.
"""

import json
import os
import re
from pathlib import Path
from typing import Any

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from image_attach.utils.constants import (
    DEFAULT_IMAGE_TOO_BIG_MESSAGE,
    DEFAULT_IMAGE_TOO_SMALL_MESSAGE,
    DEFAULT_INVALID_IMAGE_MESSAGE,
    DEFAULT_MAX_SIZE_BYTES,
    DEFAULT_MIN_SIZE_BYTES,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_OUTPUT_QUALITY,
    DEFAULT_PUBLIC_DIR,
    DEFAULT_RESIZE_SPEC,
    ENV_IMAGE_BASE_PATH,
    ENV_IMAGE_MAX_SIZE_BYTES,
    ENV_IMAGE_MIN_SIZE_BYTES,
    ENV_IMAGE_OUTPUT_FORMAT,
    ENV_IMAGE_OUTPUT_QUALITY,
    ENV_IMAGE_PATH_PREFIX,
    ENV_IMAGE_RESIZE_SPEC,
    ENV_IMAGE_THUMBNAILS,
)
from image_attach.utils.geometry import validate_geometry
from image_attach.utils.paths import extension_for

THUMBNAIL_LABEL_PATTERN = r"^[a-zA-Z0-9_-]+$"
PATH_PREFIX_PATTERN = r"^[a-zA-Z0-9_-]+(/[a-zA-Z0-9_-]+)*$"


def tableize(type_name: str) -> str:
    """Convert a record type name into a pluralized snake_case directory name.

    Example:
        tableize("GalleryEntry") -> "gallery_entries"
    """
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", type_name.strip()).lower()
    snake = re.sub(r"[^a-z0-9]+", "_", snake).strip("_")

    if not snake:
        raise ValueError("type name must contain at least one letter or digit")

    if re.search(r"[^aeiou]y$", snake):
        return snake[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", snake):
        return snake + "es"
    return snake + "s"


class AttachmentConfig(BaseModel):
    """Immutable per-record-type image attachment options."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    resize_spec: str = Field(
        DEFAULT_RESIZE_SPEC,
        description="Geometry for the main image; empty keeps the original size",
    )
    thumbnail_specs: dict[str, str] = Field(
        default_factory=dict,
        description="Thumbnail label -> geometry string",
    )
    max_size_bytes: int = Field(DEFAULT_MAX_SIZE_BYTES, ge=0)
    min_size_bytes: int = Field(DEFAULT_MIN_SIZE_BYTES, ge=0)
    path_prefix: str = Field(..., min_length=1, pattern=PATH_PREFIX_PATTERN)
    base_path: Path = Field(..., description="Filesystem directory that maps to the web root")
    output_format: str = Field(DEFAULT_OUTPUT_FORMAT, min_length=1)
    output_quality: int = Field(DEFAULT_OUTPUT_QUALITY, ge=1, le=100)

    invalid_image_message: str = DEFAULT_INVALID_IMAGE_MESSAGE
    image_too_small_message: str = DEFAULT_IMAGE_TOO_SMALL_MESSAGE
    image_too_big_message: str = DEFAULT_IMAGE_TOO_BIG_MESSAGE

    @field_validator("resize_spec")
    @classmethod
    def validate_resize_spec(cls, value: str) -> str:
        return validate_geometry(value)

    @field_validator("thumbnail_specs")
    @classmethod
    def validate_thumbnail_specs(cls, value: dict[str, str]) -> dict[str, str]:
        for label, spec in value.items():
            if not re.match(THUMBNAIL_LABEL_PATTERN, label):
                raise ValueError(f"Invalid thumbnail label '{label}'")
            validate_geometry(spec)
        return value

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, value: str) -> str:
        output_format = value.upper()
        Image.init()
        if output_format not in Image.SAVE:
            raise ValueError(f"Unsupported output format '{value}'")
        return output_format

    @model_validator(mode="after")
    def validate_size_bounds(self) -> "AttachmentConfig":
        if self.min_size_bytes > self.max_size_bytes:
            raise ValueError("min_size_bytes must not exceed max_size_bytes")
        return self

    @property
    def extension(self) -> str:
        return extension_for(self.output_format)

    @property
    def thumbnails(self) -> list[str]:
        return list(self.thumbnail_specs)

    @classmethod
    def for_record_type(cls, type_name: str, **options: Any) -> "AttachmentConfig":
        """Build a config with defaults derived from the record type name.

        Example:
            AttachmentConfig.for_record_type("Photo", thumbnail_specs={"square": "50x50"})
        """
        options.setdefault("path_prefix", tableize(type_name))
        options.setdefault(
            "base_path",
            os.getenv(ENV_IMAGE_BASE_PATH) or Path.cwd() / DEFAULT_PUBLIC_DIR,
        )
        return cls(**options)

    @classmethod
    def from_env(cls, type_name: str) -> "AttachmentConfig":
        """Build a config for ``type_name`` from IMAGE_* environment variables."""
        options: dict[str, Any] = {}

        env_options = {
            "path_prefix": ENV_IMAGE_PATH_PREFIX,
            "resize_spec": ENV_IMAGE_RESIZE_SPEC,
            "min_size_bytes": ENV_IMAGE_MIN_SIZE_BYTES,
            "max_size_bytes": ENV_IMAGE_MAX_SIZE_BYTES,
            "output_format": ENV_IMAGE_OUTPUT_FORMAT,
            "output_quality": ENV_IMAGE_OUTPUT_QUALITY,
        }
        for option, env_name in env_options.items():
            value = os.getenv(env_name)
            if value is not None:
                options[option] = value

        thumbnails = os.getenv(ENV_IMAGE_THUMBNAILS)
        if thumbnails:
            parsed = json.loads(thumbnails)
            if not isinstance(parsed, dict):
                raise ValueError(f"{ENV_IMAGE_THUMBNAILS} must be a JSON object")
            options["thumbnail_specs"] = parsed

        return cls.for_record_type(type_name, **options)
