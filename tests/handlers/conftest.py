import base64
import json
import tempfile
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from image_attach.models.errors import RecordNotFoundError
from image_attach.models.record import ImageRecord
from image_attach.repositories.record_repository import ImageRecordRepository


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def staging_dir(tmp_path, monkeypatch) -> Path:
    """Redirect staged uploads so tests can assert they are cleaned up."""
    directory = tmp_path / "staging"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture
def handler_env(monkeypatch, public_dir: Path, dynamodb_table, staging_dir: Path) -> Path:
    monkeypatch.setenv("IMAGE_BASE_PATH", str(public_dir))
    monkeypatch.setenv("IMAGE_THUMBNAILS", json.dumps({"square": "50x50"}))
    return public_dir


def _encode(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


@pytest.fixture
def create_event() -> Callable[..., dict[str, Any]]:
    def _event(data: bytes, title: str | None = "Sunset") -> dict[str, Any]:
        return {
            "httpMethod": "POST",
            "path": "/records",
            "body": json.dumps({"file": _encode(data), "title": title}),
        }

    return _event


@pytest.fixture
def replace_event() -> Callable[..., dict[str, Any]]:
    def _event(record_id: Any, data: bytes) -> dict[str, Any]:
        return {
            "httpMethod": "PUT",
            "path": f"/records/{record_id}/image",
            "pathParameters": {"record_id": str(record_id)},
            "body": json.dumps({"file": _encode(data)}),
        }

    return _event


@pytest.fixture
def record_event() -> Callable[..., dict[str, Any]]:
    def _event(
        record_id: Any,
        method: str = "GET",
        query: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": f"/records/{record_id}",
            "pathParameters": {"record_id": str(record_id)},
            "queryStringParameters": query,
        }

    return _event


class InMemoryRecords(ImageRecordRepository):
    """Dict-backed repository for service tests."""

    def __init__(self) -> None:
        self.items: dict[int, ImageRecord] = {}
        self._next_id = 0

    def allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def create_record(self, *, record: ImageRecord) -> None:
        self.items[record.record_id] = record

    def fetch_record(self, *, record_id: int) -> ImageRecord | None:
        return self.items.get(record_id)

    def set_image_name(self, record_id: int, name: str | None) -> None:
        if record_id not in self.items:
            raise RecordNotFoundError(message="Record not found")
        self.items[record_id] = self.items[record_id].model_copy(update={"image_file": name})

    def delete_record(self, *, record_id: int) -> None:
        self.items.pop(record_id, None)


@pytest.fixture
def in_memory_records() -> InMemoryRecords:
    return InMemoryRecords()
