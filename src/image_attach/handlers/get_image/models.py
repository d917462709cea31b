from pydantic import BaseModel, ConfigDict, Field, StrictStr

from image_attach.models.record import ImagePaths


class GetImageRequest(BaseModel):
    """Validation model for get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    record_id: int = Field(..., ge=1, description="Record whose image is requested")
    thumbnail: StrictStr | None = Field(
        default=None,
        min_length=1,
        description="Thumbnail label; the main image when omitted",
    )


class GetImageResponse(BaseModel):
    """Public location of a record's image."""

    record_id: int
    image_file: str
    thumbnail: str | None = None
    path: str = Field(..., description="Public path of the requested image")
    paths: ImagePaths
