"""Business logic for replacing the image attached to a record."""

import io
from typing import Any

from aws_lambda_powertools import Logger

from image_attach.infrastructure.aws.dynamodb_records import DynamoDBRecords
from image_attach.lifecycle.attachment import AttachmentLifecycle
from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import RecordNotFoundError, ValidationError
from image_attach.repositories.record_repository import ImageRecordRepository
from image_attach.utils.constants import RECORD_TYPE

logger = Logger(utc=True)


class ReplaceImageService:
    """Application service responsible for swapping a record's image."""

    def __init__(
        self,
        config: AttachmentConfig | None = None,
        records: ImageRecordRepository | None = None,
    ) -> None:
        self.config = config or AttachmentConfig.from_env(RECORD_TYPE)
        self.records = records or DynamoDBRecords()

    def replace_image(self, *, record_id: int, file_data: bytes) -> dict[str, Any]:
        """Validate the new upload, then remove the old files and install the new ones.

        The old files are only touched once the new upload has passed validation.

        Raises:
            RecordNotFoundError: If the record does not exist
            ValidationError: If the upload fails the validation gate
            ProcessorError: If the image cannot be processed
        """
        record = self.records.fetch_record(record_id=record_id)
        if record is None:
            raise RecordNotFoundError(
                message=f"Record not found: {record_id}",
                details={"record_id": record_id},
            )

        lifecycle = AttachmentLifecycle(self.config, self.records)

        try:
            lifecycle.assign_image_data(io.BytesIO(file_data))

            errors = lifecycle.validate()
            if errors:
                raise ValidationError(message=errors[0], details={"errors": errors})

            stored = lifecycle.before_update(record_id, record.image_file)
        finally:
            lifecycle.discard_pending_image()

        logger.info(
            "Record image replaced",
            extra={
                "record_id": record_id,
                "image_name": stored.name,
                "previous_image_name": record.image_file,
            },
        )

        return {
            "record_id": record_id,
            "image_file": stored.name,
            "previous_image_file": record.image_file,
            "paths": lifecycle.paths(record_id, stored.name),
        }
