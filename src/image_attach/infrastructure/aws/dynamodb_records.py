"""DynamoDB-backed implementation of ImageRecordRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from image_attach.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from image_attach.models.errors import RecordNotFoundError, RecordStoreError
from image_attach.models.record import ImageRecord
from image_attach.repositories.record_repository import ImageRecordRepository
from image_attach.utils.constants import (
    ERROR_CODE_ID_ALLOCATION_FAILED,
    ERROR_CODE_RECORD_CREATE_FAILED,
    ERROR_CODE_RECORD_DELETE_FAILED,
    ERROR_CODE_RECORD_FETCH_FAILED,
    ERROR_CODE_RECORD_UPDATE_FAILED,
    IMAGE_NAME_ATTRIBUTE,
    RECORD_ID_COUNTER_KEY,
)
from image_attach.utils.time import utc_now_iso

Item = dict[str, Any]

logger = Logger(utc=True)


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


class DynamoDBRecords(ImageRecordRepository):
    """DynamoDB-backed record storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    def allocate_id(self) -> int:
        """Increment the counter item and return the new id."""
        try:
            response = self._db.update_item(
                key={"record_id": RECORD_ID_COUNTER_KEY},
                update_expression="ADD next_id :one",
                expression_values={":one": 1},
                return_values="UPDATED_NEW",
            )
        except ClientError as exc:
            logger.error("DynamoDB id allocation failed")
            raise RecordStoreError(
                message="Unable to allocate a record id",
                error_code=ERROR_CODE_ID_ALLOCATION_FAILED,
            ) from exc

        record_id = int(response["Attributes"]["next_id"])
        logger.debug("Record id allocated", extra={"record_id": record_id})
        return record_id

    def create_record(self, *, record: ImageRecord) -> None:
        item: Item = record.model_dump(exclude_none=True)

        logger.debug("Creating record", extra={"record_id": record.record_id})

        try:
            self._db.put_item(
                item=item,
                condition_expression="attribute_not_exists(record_id)",
            )
        except ClientError as exc:
            logger.error(
                "DynamoDB put_item failed",
                extra={"record_id": record.record_id, "error_code": _error_code(exc)},
            )
            raise RecordStoreError(
                message="Unable to save record at this time",
                error_code=ERROR_CODE_RECORD_CREATE_FAILED,
                details={"record_id": record.record_id},
            ) from exc

        logger.info("Record created", extra={"record_id": record.record_id})

    def fetch_record(self, *, record_id: int) -> ImageRecord | None:
        logger.debug("Fetching record", extra={"record_id": record_id})

        try:
            response = self._db.get_item(key={"record_id": record_id})
        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"record_id": record_id})
            raise RecordStoreError(
                message="Unable to retrieve record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"record_id": record_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return ImageRecord(
            record_id=int(item["record_id"]),
            title=item.get("title"),
            image_file=item.get(IMAGE_NAME_ATTRIBUTE),
            created_at=item["created_at"],
            updated_at=item.get("updated_at"),
        )

    def set_image_name(self, record_id: int, name: str | None) -> None:
        """Write or clear the image name with a single conditional update."""
        if name:
            update_expression = "SET #image = :name, updated_at = :now"
            values: Item = {":name": name, ":now": utc_now_iso()}
        else:
            update_expression = "SET updated_at = :now REMOVE #image"
            values = {":now": utc_now_iso()}

        try:
            self._db.update_item(
                key={"record_id": record_id},
                update_expression=update_expression,
                expression_values=values,
                expression_names={"#image": IMAGE_NAME_ATTRIBUTE},
                condition_expression="attribute_exists(record_id)",
            )
        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                raise RecordNotFoundError(
                    message="Record not found",
                    details={"record_id": record_id},
                ) from exc

            logger.error("DynamoDB update_item failed", extra={"record_id": record_id})
            raise RecordStoreError(
                message="Unable to update record",
                error_code=ERROR_CODE_RECORD_UPDATE_FAILED,
                details={"record_id": record_id},
            ) from exc

        logger.debug(
            "Image name stored",
            extra={"record_id": record_id, "image_name": name},
        )

    def delete_record(self, *, record_id: int) -> None:
        try:
            self._db.delete_item(key={"record_id": record_id})
        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"record_id": record_id})
            raise RecordStoreError(
                message="Unable to delete record",
                error_code=ERROR_CODE_RECORD_DELETE_FAILED,
                details={"record_id": record_id},
            ) from exc

        logger.info("Record deleted", extra={"record_id": record_id})
