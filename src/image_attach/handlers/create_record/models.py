"""Pydantic models for record creation request/response."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_attach.models.record import ImagePaths
from image_attach.utils.constants import TITLE_MAX_LENGTH
from image_attach.utils.validators import decode_base64_file


class CreateRecordRequest(BaseModel):
    """Validation model for record creation request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    title: str | None = Field(
        None,
        max_length=TITLE_MAX_LENGTH,
        description="Optional record title",
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        decode_base64_file(value)
        return value

    @property
    def file_data(self) -> bytes:
        return decode_base64_file(self.file)


class CreateRecordResponse(BaseModel):
    """Response model for a created record."""

    record_id: int = Field(..., description="Allocated record id")
    title: str | None = Field(None, description="Record title")
    image_file: str | None = Field(None, description="Stored image name")
    paths: ImagePaths | None = Field(None, description="Public image paths")
    created_at: str = Field(..., description="Creation timestamp")
    message: str = Field(..., description="Success message")
