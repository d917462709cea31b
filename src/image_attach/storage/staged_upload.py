"""Staged upload: a temporary file holding uploaded bytes until installed."""

import os
import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from aws_lambda_powertools import Logger

from image_attach.utils.constants import FILE_CHUNK_SIZE, STAGED_FILE_PREFIX
from image_attach.utils.naming import generate_name

logger = Logger(utc=True)


class PendingUpload:
    """Uploaded image bytes buffered to a named temporary file.

    A PendingUpload is owned by exactly one ImageStorage for one save cycle
    and is released (deleted from disk) exactly once. Use it as a context
    manager to guarantee release.
    """

    def __init__(self) -> None:
        handle = tempfile.NamedTemporaryFile(
            prefix=f"{STAGED_FILE_PREFIX}{generate_name()}_",
            delete=False,
        )
        self._file: BinaryIO = handle
        self.path = Path(handle.name)
        self._released = False

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> "PendingUpload":
        pending = cls()
        pending._file.write(data)
        pending._file.flush()
        return pending

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "PendingUpload":
        pending = cls()
        if hasattr(stream, "seek"):
            stream.seek(0)
        shutil.copyfileobj(stream, pending._file, FILE_CHUNK_SIZE)
        pending._file.flush()
        return pending

    @property
    def closed(self) -> bool:
        return self._file.closed

    @property
    def released(self) -> bool:
        return self._released

    @property
    def size(self) -> int:
        """Byte length of the staged data, reopening the file if needed."""
        self.reopen()
        self._file.flush()
        return os.fstat(self._file.fileno()).st_size

    def reopen(self) -> None:
        if self._released:
            raise ValueError("staged upload has already been released")
        if self._file.closed:
            self._file = open(self.path, "r+b")  # noqa: SIM115

    def close(self) -> None:
        """Flush and close the handle so other readers see the full file."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def release(self) -> None:
        """Close and delete the staged file. Safe to call more than once."""
        if self._released:
            return

        self.close()
        self.path.unlink(missing_ok=True)
        self._released = True

        logger.debug("Staged upload released", extra={"path": str(self.path)})

    def __enter__(self) -> "PendingUpload":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
