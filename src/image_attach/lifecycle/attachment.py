"""Binds image storage to a host record's save cycle.

The host calls these methods at fixed points of a record save:

    validate()        before committing a create (and, optionally, an update)
    after_create()    once the new record has an id
    before_update()   when an existing record is saved again
    before_delete()   before the record is removed

Only the generated image name is written back, through the host's
ImageNameWriter, which must not trigger the host's own save hooks.
"""

import io
from collections.abc import Callable
from pathlib import Path

from aws_lambda_powertools import Logger

from image_attach.models.config import AttachmentConfig
from image_attach.models.record import ImagePaths, StoredImage
from image_attach.repositories.record_repository import ImageNameWriter
from image_attach.storage.filesystem_storage import ImageData, ImageStorage

StorageFactory = Callable[[AttachmentConfig], ImageStorage]

logger = Logger(utc=True)


class AttachmentLifecycle:
    """Image attachment hooks for one record save."""

    def __init__(
        self,
        config: AttachmentConfig,
        writer: ImageNameWriter,
        storage_factory: StorageFactory = ImageStorage,
    ) -> None:
        self._config = config
        self._writer = writer
        self._storage = storage_factory(config)

    @property
    def storage(self) -> ImageStorage:
        return self._storage

    @property
    def thumbnails(self) -> list[str]:
        return self._config.thumbnails

    @staticmethod
    def has_image(name: str | None) -> bool:
        return bool(name)

    def assign_image_data(self, data: ImageData | None) -> None:
        """Buffer new image data; None is ignored.

        Empty bytes are buffered as an empty stream so the validation gate
        rejects them as too small.
        """
        if data is None:
            return
        if isinstance(data, (bytes, bytearray)) and not data:
            data = io.BytesIO()
        self._storage.set_image_data(data)

    def has_pending_image(self) -> bool:
        return self._storage.has_pending_upload

    def discard_pending_image(self) -> None:
        """Drop buffered image data, e.g. after the host aborts the save."""
        self._storage.discard()

    def validate(self) -> list[str]:
        """Validation messages to attach to the record; empty when valid."""
        return self._storage.validate()

    def after_create(self, record_id: int) -> StoredImage | None:
        """Install the pending image for a newly created record."""
        if not self._storage.has_pending_upload:
            return None

        return self._install(record_id)

    def before_update(self, record_id: int, current_name: str | None) -> StoredImage | None:
        """Replace the record's images when new image data is pending."""
        if not self._storage.has_pending_upload:
            return None

        self.before_delete(record_id, current_name)
        return self._install(record_id)

    def before_delete(self, record_id: int, current_name: str | None) -> None:
        """Clear the stored name and delete the record's image files."""
        if not self.has_image(current_name):
            return

        self._writer.set_image_name(record_id, None)
        self._storage.remove_images(record_id)

        logger.info(
            "Record images detached",
            extra={"record_id": record_id, "image_name": current_name},
        )

    def regenerate_thumbnails(self, record_id: int, name: str) -> None:
        self._storage.regenerate_thumbnails(record_id, name)

    def public_path(self, record_id: int, name: str, thumbnail: str | None = None) -> str:
        return self._storage.public_path_for(record_id, name, thumbnail)

    def absolute_path(self, record_id: int, name: str, thumbnail: str | None = None) -> Path:
        return self._storage.filesystem_path_for(record_id, name, thumbnail)

    def paths(self, record_id: int, name: str) -> ImagePaths:
        return self._storage.paths_for(record_id, name)

    def _install(self, record_id: int) -> StoredImage:
        name = self._storage.install_images(record_id)
        self._writer.set_image_name(record_id, name)
        return StoredImage(name=name)
