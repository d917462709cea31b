"""Abstract contracts for host record persistence."""

from abc import ABC, abstractmethod
from typing import Protocol

from image_attach.models.record import ImageRecord


class ImageNameWriter(Protocol):
    """The one write the attachment lifecycle needs from a host.

    ``set_image_name`` must store the name without running any of the
    host's own save hooks, otherwise the lifecycle would re-enter itself.
    """

    def set_image_name(self, record_id: int, name: str | None) -> None: ...


class ImageRecordRepository(ABC):
    """Contract for storing records that own an attached image.

    Implementations could be DynamoDB, PostgreSQL, an ORM, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def allocate_id(self) -> int:
        """Reserve the next positive record id.

        Raises:
            RecordStoreError: If allocation fails
        """

    @abstractmethod
    def create_record(self, *, record: ImageRecord) -> None:
        """Persist a new record.

        Raises:
            RecordStoreError: If the record exists or creation fails
        """

    @abstractmethod
    def fetch_record(self, *, record_id: int) -> ImageRecord | None:
        """Fetch a record, or None if it does not exist.

        Raises:
            RecordStoreError: If the fetch fails
        """

    @abstractmethod
    def set_image_name(self, record_id: int, name: str | None) -> None:
        """Write only the image name column; None clears it.

        Raises:
            RecordNotFoundError: If the record does not exist
            RecordStoreError: If the update fails
        """

    @abstractmethod
    def delete_record(self, *, record_id: int) -> None:
        """Delete a record.

        Raises:
            RecordStoreError: If deletion fails
        """
