"""Business logic for creating a record with an attached image.

The create flow mirrors a host's save cycle: validate the upload, persist
the record to obtain an id, then install the image under that id.
"""

import io
from typing import Any

from aws_lambda_powertools import Logger

from image_attach.infrastructure.aws.dynamodb_records import DynamoDBRecords
from image_attach.lifecycle.attachment import AttachmentLifecycle
from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import ValidationError
from image_attach.models.record import ImageRecord
from image_attach.repositories.record_repository import ImageRecordRepository
from image_attach.utils.constants import RECORD_TYPE
from image_attach.utils.time import utc_now_iso

logger = Logger(utc=True)


class CreateRecordService:
    """Application service responsible for record creation.

    This service orchestrates:
    - Running the upload validation gate
    - Allocating an id and persisting the record
    - Installing the image and its thumbnails
    - Rolling back the record when installation fails
    """

    def __init__(
        self,
        config: AttachmentConfig | None = None,
        records: ImageRecordRepository | None = None,
    ) -> None:
        self.config = config or AttachmentConfig.from_env(RECORD_TYPE)
        self.records = records or DynamoDBRecords()

    def create_record(self, *, file_data: bytes, title: str | None = None) -> dict[str, Any]:
        """Create a record and attach the uploaded image.

        Args:
            file_data: Raw uploaded bytes
            title: Optional record title

        Returns:
            The created record, its image name and public paths

        Raises:
            ValidationError: If the upload fails the validation gate
            ProcessorError: If the image cannot be processed
            RecordStoreError: If the record cannot be persisted
        """
        lifecycle = AttachmentLifecycle(self.config, self.records)

        try:
            lifecycle.assign_image_data(io.BytesIO(file_data))

            errors = lifecycle.validate()
            if errors:
                raise ValidationError(message=errors[0], details={"errors": errors})

            record = ImageRecord(
                record_id=self.records.allocate_id(),
                title=title,
                created_at=utc_now_iso(),
            )
            self.records.create_record(record=record)

            try:
                stored = lifecycle.after_create(record.record_id)
            except Exception:
                logger.exception(
                    "Image installation failed, rolling back record",
                    extra={"record_id": record.record_id},
                )
                self._rollback(lifecycle, record.record_id)
                raise
        finally:
            lifecycle.discard_pending_image()

        image_file = stored.name if stored else None
        logger.info(
            "Record created with image",
            extra={"record_id": record.record_id, "image_name": image_file},
        )

        return {
            "record_id": record.record_id,
            "title": record.title,
            "image_file": image_file,
            "paths": lifecycle.paths(record.record_id, image_file) if image_file else None,
            "created_at": record.created_at,
        }

    def _rollback(self, lifecycle: AttachmentLifecycle, record_id: int) -> None:
        # Best-effort cleanup to avoid orphaned files and records
        try:
            lifecycle.storage.remove_images(record_id)
            self.records.delete_record(record_id=record_id)
        except Exception:
            logger.warning(
                "Failed to roll back record after image installation failure",
                extra={"record_id": record_id},
            )
