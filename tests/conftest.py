"""
Pytest configuration and fixtures for image_attach tests.
Provides AWS mocking, a DynamoDB record table, Pillow image factories
and attachment configs rooted in a temporary directory.
"""

import io
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_RECORD_TABLE_NAME", "image-records-test")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageAttachTests")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-attach")

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from image_attach.models.config import AttachmentConfig


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """Create the record table keyed by numeric record_id."""
    table_name = os.getenv("IMAGE_RECORD_TABLE_NAME")

    try:
        table = dynamodb_resource.Table(table_name)
        table.load()
    except ClientError:
        table = dynamodb_resource.create_table(
            TableName=table_name,
            BillingMode="PAY_PER_REQUEST",
            KeySchema=[{"AttributeName": "record_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "record_id", "AttributeType": "N"}],
        )
        table.wait_until_exists()

    yield table


@pytest.fixture
def dynamodb_get_item(dynamodb_table) -> Callable[[int], dict[str, Any] | None]:
    """
    Helper to get a single item from DynamoDB.

    Usage:
        item = dynamodb_get_item(42)
    """

    def _get(record_id: int) -> dict[str, Any] | None:
        response: dict[str, Any] = dynamodb_table.get_item(Key={"record_id": record_id})
        return response.get("Item")

    return _get


def _noise_image(size: tuple[int, int], mode: str) -> Image.Image:
    # Random pixels keep encoded files comfortably above the minimum size
    channels = len(Image.new(mode, (1, 1)).getbands())
    return Image.frombytes(mode, size, os.urandom(size[0] * size[1] * channels))


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory producing encoded image bytes.

    Usage:
        data = make_image(size=(400, 300), image_format="PNG", mode="RGBA")
    """

    def _make(
        size: tuple[int, int] = (400, 300),
        image_format: str = "JPEG",
        mode: str = "RGB",
        **save_params: Any,
    ) -> bytes:
        buffer = io.BytesIO()
        if image_format == "JPEG":
            save_params.setdefault("quality", 95)
        _noise_image(size, mode).save(buffer, format=image_format, **save_params)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_jpeg(make_image) -> bytes:
    """A 400x300 JPEG well above the default 4KB minimum."""
    return make_image()


@pytest.fixture
def public_dir(tmp_path) -> Path:
    return tmp_path / "public"


@pytest.fixture
def photo_config(public_dir) -> AttachmentConfig:
    """Photo config: 200x200 main image plus a 50x50 "square" thumbnail."""
    return AttachmentConfig.for_record_type(
        "Photo",
        base_path=public_dir,
        thumbnail_specs={"square": "50x50"},
    )


@pytest.fixture
def image_size() -> Callable[[Path], tuple[int, int]]:
    def _size(path: Path) -> tuple[int, int]:
        with Image.open(path) as image:
            return image.size

    return _size
