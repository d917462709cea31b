"""Business logic for locating a record's stored image."""

from typing import Any

from aws_lambda_powertools import Logger

from image_attach.infrastructure.aws.dynamodb_records import DynamoDBRecords
from image_attach.lifecycle.attachment import AttachmentLifecycle
from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import ImageNotFoundError, RecordNotFoundError
from image_attach.repositories.record_repository import ImageRecordRepository
from image_attach.utils.constants import RECORD_TYPE

logger = Logger(utc=True)


class GetImageService:
    """Resolves public paths for a record's main image and thumbnails."""

    def __init__(
        self,
        config: AttachmentConfig | None = None,
        records: ImageRecordRepository | None = None,
    ) -> None:
        self.config = config or AttachmentConfig.from_env(RECORD_TYPE)
        self.records = records or DynamoDBRecords()

    def get_image(self, record_id: int, thumbnail: str | None = None) -> dict[str, Any]:
        """
        Raises:
            RecordNotFoundError: If the record does not exist
            ImageNotFoundError: If the record has no image or the thumbnail label is unknown
        """
        record = self.records.fetch_record(record_id=record_id)
        if record is None:
            raise RecordNotFoundError(
                message=f"Record not found: {record_id}",
                details={"record_id": record_id},
            )

        lifecycle = AttachmentLifecycle(self.config, self.records)

        if not lifecycle.has_image(record.image_file):
            raise ImageNotFoundError(
                message=f"Record {record_id} has no image",
                details={"record_id": record_id},
            )

        if thumbnail is not None and thumbnail not in lifecycle.thumbnails:
            logger.warning(
                "Unknown thumbnail requested",
                extra={"record_id": record_id, "thumbnail": thumbnail},
            )
            raise ImageNotFoundError(
                message=f"Unknown thumbnail: {thumbnail}",
                details={"record_id": record_id, "thumbnail": thumbnail},
            )

        return {
            "record_id": record_id,
            "image_file": record.image_file,
            "thumbnail": thumbnail,
            "path": lifecycle.public_path(record_id, record.image_file, thumbnail),
            "paths": lifecycle.paths(record_id, record.image_file),
        }
