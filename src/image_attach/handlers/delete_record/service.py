"""Business logic for record deletion.

Image files are removed before the record itself, so a failure part way
leaves a record without an image rather than orphaned files.
"""

from typing import Any

from aws_lambda_powertools import Logger

from image_attach.infrastructure.aws.dynamodb_records import DynamoDBRecords
from image_attach.lifecycle.attachment import AttachmentLifecycle
from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import RecordNotFoundError
from image_attach.repositories.record_repository import ImageRecordRepository
from image_attach.utils.constants import RECORD_TYPE
from image_attach.utils.time import utc_now_iso

logger = Logger(utc=True)


class DeleteRecordService:
    """Application service responsible for deleting records and their images."""

    def __init__(
        self,
        config: AttachmentConfig | None = None,
        records: ImageRecordRepository | None = None,
    ) -> None:
        self.config = config or AttachmentConfig.from_env(RECORD_TYPE)
        self.records = records or DynamoDBRecords()

    def delete_record(self, record_id: int) -> dict[str, Any]:
        """Delete a record and every stored image file.

        Raises:
            RecordNotFoundError: If the record does not exist
            RecordStoreError: If the record store fails
        """
        logger.debug("Starting record deletion", extra={"record_id": record_id})

        record = self.records.fetch_record(record_id=record_id)
        if record is None:
            logger.warning("Record not found", extra={"record_id": record_id})
            raise RecordNotFoundError(
                message=f"Record not found: {record_id}",
                details={"record_id": record_id},
            )

        lifecycle = AttachmentLifecycle(self.config, self.records)
        lifecycle.before_delete(record_id, record.image_file)

        self.records.delete_record(record_id=record_id)

        logger.info("Record deleted successfully", extra={"record_id": record_id})

        return {
            "record_id": record_id,
            "image_file": record.image_file,
            "deleted_at": utc_now_iso(),
        }
