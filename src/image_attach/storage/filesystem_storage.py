"""Filesystem storage for attached images.

ImageStorage handles one upload cycle for one record save:

    EMPTY -> BUFFERED -> VALIDATED | REJECTED -> INSTALLED

Files for a record live in a partitioned directory, e.g.

    <base_path>/photos/0000/0042/3er0zs.jpg
    <base_path>/photos/0000/0042/3er0zs_square.jpg
"""

import shutil
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from aws_lambda_powertools import Logger

from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import FileTooBigError, FileTooSmallError, StorageError
from image_attach.models.record import ImagePaths
from image_attach.processing.processor import ImageProcessor
from image_attach.storage.staged_upload import PendingUpload
from image_attach.utils.constants import ERROR_CODE_NO_IMAGE_DATA, format_file_size
from image_attach.utils.naming import generate_name
from image_attach.utils.paths import file_name_for, partitioned_path

ImageData = bytes | bytearray | BinaryIO | PendingUpload

logger = Logger(utc=True)


class UploadState(str, Enum):
    EMPTY = "empty"
    BUFFERED = "buffered"
    VALIDATED = "validated"
    REJECTED = "rejected"
    INSTALLED = "installed"


class ImageStorage:
    """Buffers, validates, installs and removes the images of a record.

    No locking is done here: callers must not run two saves for the same
    record id at the same time.
    """

    def __init__(
        self,
        config: AttachmentConfig,
        processor: ImageProcessor | None = None,
    ) -> None:
        self._config = config
        self._processor = processor or ImageProcessor(config)
        self._pending: PendingUpload | None = None
        self.state = UploadState.EMPTY

    @property
    def config(self) -> AttachmentConfig:
        return self._config

    @property
    def pending_upload(self) -> PendingUpload | None:
        return self._pending

    @property
    def has_pending_upload(self) -> bool:
        return self._pending is not None

    # ------------------------------------------------------------------
    # Buffering and validation
    # ------------------------------------------------------------------

    def set_image_data(self, data: ImageData | None) -> None:
        """Buffer uploaded image data for this save cycle.

        A PendingUpload is adopted as-is; bytes and binary streams are copied
        into a new staged file. Any previously buffered data is released.

        Raises:
            StorageError: If ``data`` is None or empty bytes
        """
        if data is None or (isinstance(data, (bytes, bytearray)) and not data):
            raise StorageError(
                message="No image data was provided",
                error_code=ERROR_CODE_NO_IMAGE_DATA,
            )

        if isinstance(data, PendingUpload):
            if data.released:
                raise StorageError(
                    message="Staged upload has already been released",
                    error_code=ERROR_CODE_NO_IMAGE_DATA,
                )
            pending = data
        elif isinstance(data, (bytes, bytearray)):
            pending = PendingUpload.from_bytes(data)
        else:
            pending = PendingUpload.from_stream(data)

        if self._pending is not None and self._pending is not pending:
            self._pending.release()

        self._pending = pending
        self.state = UploadState.BUFFERED

        logger.debug(
            "Image data buffered",
            extra={"path": str(pending.path), "size": pending.size},
        )

    def discard(self) -> None:
        """Release any buffered upload without installing it."""
        if self._pending is None:
            return

        self._pending.release()
        self._pending = None
        self.state = UploadState.EMPTY

    def image_too_small(self) -> bool:
        """Is the buffered upload smaller than the allowed minimum?"""
        return self._require_pending().size < self._config.min_size_bytes

    def image_too_big(self) -> bool:
        """Is the buffered upload larger than the allowed maximum?"""
        return self._require_pending().size > self._config.max_size_bytes

    def within_size_bounds(self) -> bool:
        return not (self.image_too_small() or self.image_too_big())

    def ensure_within_size_bounds(self) -> None:
        """Raising variant of the size checks.

        Raises:
            FileTooBigError: If the upload exceeds ``max_size_bytes``
            FileTooSmallError: If the upload is below ``min_size_bytes``
        """
        size = self._require_pending().size

        if self.image_too_big():
            raise FileTooBigError(
                message=self._config.image_too_big_message,
                details={"size": format_file_size(size)},
            )

        if self.image_too_small():
            raise FileTooSmallError(
                message=self._config.image_too_small_message,
                details={"size": format_file_size(size)},
            )

    def validate(self) -> list[str]:
        """Run the validation gate and return user-facing messages.

        No pending upload is not an error here; whether an image is required
        is up to the host. Checks run in order (too big, too small,
        undecodable) and the first failure wins.
        """
        if self._pending is None:
            return []

        errors: list[str] = []

        if self.image_too_big():
            errors.append(self._config.image_too_big_message)
        elif self.image_too_small():
            errors.append(self._config.image_too_small_message)
        else:
            self._pending.close()
            if not self._processor.is_valid_image(self._pending.path):
                errors.append(self._config.invalid_image_message)

        self.state = UploadState.REJECTED if errors else UploadState.VALIDATED

        if errors:
            logger.info(
                "Image upload rejected",
                extra={"errors": errors, "size": self._pending.size},
            )

        return errors

    # ------------------------------------------------------------------
    # Install / remove
    # ------------------------------------------------------------------

    def install_images(self, record_id: int) -> str:
        """Process the buffered upload into the main image and its thumbnails.

        The staged upload is released whether or not installation succeeds.

        Args:
            record_id: Positive id of the owning record

        Returns:
            The generated image name to persist on the record

        Raises:
            StorageError: If there is nothing to install or the upload was rejected
            ProcessorError: If the image cannot be processed
            OSError: If the files cannot be written
        """
        pending = self._require_pending()
        self._pending = None

        with pending:
            if self.state == UploadState.REJECTED:
                self.state = UploadState.EMPTY
                raise StorageError(
                    message="Cannot install an image that failed validation",
                    details={"record_id": record_id},
                )

            pending.close()
            name = generate_name()

            logger.debug(
                "Installing images",
                extra={"record_id": record_id, "image_name": name},
            )

            main_path = self._install_main_image(record_id, name, pending.path)
            self._install_thumbnails(record_id, name, main_path)

        self.state = UploadState.INSTALLED

        logger.info(
            "Images installed",
            extra={
                "record_id": record_id,
                "image_name": name,
                "thumbnails": self._config.thumbnails,
            },
        )
        return name

    def regenerate_thumbnails(self, record_id: int, name: str) -> None:
        """Rebuild every configured thumbnail from the stored main image.

        Raises:
            StorageError: If the main image does not exist
        """
        main_path = self.filesystem_path_for(record_id, name)
        if not main_path.is_file():
            raise StorageError(
                message="Main image not found",
                details={"record_id": record_id, "image_name": name},
            )

        self._install_thumbnails(record_id, name, main_path)

        logger.info(
            "Thumbnails regenerated",
            extra={"record_id": record_id, "image_name": name},
        )

    def remove_images(self, record_id: int) -> None:
        """Delete the record's image directory. A missing directory is not an error."""
        directory = self.directory_for(record_id)

        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            logger.warning(
                "Could not delete image files, directory already absent",
                extra={"record_id": record_id, "directory": str(directory)},
            )
            return

        logger.info(
            "Images removed",
            extra={"record_id": record_id, "directory": str(directory)},
        )

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def directory_for(self, record_id: int) -> Path:
        """Full directory for a record, e.g. ``/srv/public/photos/0000/0001``."""
        return Path(self._config.base_path, self._config.path_prefix, *partitioned_path(record_id))

    def filesystem_path_for(self, record_id: int, name: str, thumbnail: str | None = None) -> Path:
        """Absolute path of an image, e.g. ``/srv/public/photos/0000/0001/3er0zs.jpg``."""
        return self.directory_for(record_id) / file_name_for(name, self._config.extension, thumbnail)

    def public_path_for(self, record_id: int, name: str, thumbnail: str | None = None) -> str:
        """Web path of an image, e.g. ``/photos/0000/0001/3er0zs.jpg``."""
        path = self.filesystem_path_for(record_id, name, thumbnail)
        return "/" + path.relative_to(self._config.base_path).as_posix()

    def paths_for(self, record_id: int, name: str) -> ImagePaths:
        return ImagePaths(
            main=self.public_path_for(record_id, name),
            thumbnails={
                label: self.public_path_for(record_id, name, label)
                for label in self._config.thumbnail_specs
            },
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_pending(self) -> PendingUpload:
        if self._pending is None:
            raise StorageError(
                message="No image data has been set",
                error_code=ERROR_CODE_NO_IMAGE_DATA,
            )
        return self._pending

    def _install_main_image(self, record_id: int, name: str, source: Path) -> Path:
        directory = self.directory_for(record_id)
        directory.mkdir(parents=True, exist_ok=True)

        with self._processor.resize(source, self._config.resize_spec) as main:
            return main.write(self.filesystem_path_for(record_id, name))

    def _install_thumbnails(self, record_id: int, name: str, main_path: Path) -> None:
        # Thumbnails derive from the installed main image, not the upload
        for label, spec in self._config.thumbnail_specs.items():
            with self._processor.resize(main_path, spec) as thumbnail:
                thumbnail.write(self.filesystem_path_for(record_id, name, label))
