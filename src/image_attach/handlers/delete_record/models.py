from pydantic import BaseModel, Field


class DeleteRecordRequest(BaseModel):
    """Validation model for record deletion request."""

    record_id: int = Field(..., ge=1, description="Record to delete")


class DeleteRecordResponse(BaseModel):
    """Response model for record deletion."""

    record_id: int
    image_file: str | None = None
    deleted_at: str
    message: str
