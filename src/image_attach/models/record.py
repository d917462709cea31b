"""Shared record and stored-image models."""

from pydantic import BaseModel, Field, StrictInt, StrictStr


class StoredImage(BaseModel):
    """The persisted result of an install: the name every stored file derives from."""

    name: StrictStr = Field(..., min_length=1, description="Random token naming the image files")


class ImagePaths(BaseModel):
    """Public (web) paths of a record's main image and thumbnails."""

    main: StrictStr = Field(..., description="Public path of the main image")
    thumbnails: dict[str, str] = Field(
        default_factory=dict,
        description="Thumbnail label -> public path",
    )


class ImageRecord(BaseModel):
    """A host record that may own an attached image."""

    record_id: StrictInt = Field(..., ge=1, description="Numeric record identifier")
    title: StrictStr | None = Field(None, description="Optional record title")
    image_file: StrictStr | None = Field(None, description="Stored image name, if any")

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr | None = Field(None, description="ISO-8601 last update timestamp (UTC)")

    @property
    def has_image(self) -> bool:
        return bool(self.image_file)
