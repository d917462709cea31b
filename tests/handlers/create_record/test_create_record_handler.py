import json
from pathlib import Path

import pytest

from image_attach.handlers.create_record.handler import handler
from image_attach.infrastructure.aws.dynamodb_records import DynamoDBRecords
from image_attach.lifecycle.attachment import AttachmentLifecycle


@pytest.mark.usefixtures("handler_env")
class TestCreateRecordHandler:
    def test_creates_record_with_image(
        self, create_event, sample_jpeg, lambda_context, public_dir: Path, staging_dir: Path, image_size
    ) -> None:
        response = handler(create_event(sample_jpeg), lambda_context)

        assert response["statusCode"] == 201
        body = json.loads(response["body"])
        name = body["image_file"]

        assert body["record_id"] == 1
        assert body["title"] == "Sunset"
        assert len(name) == 6
        assert body["paths"] == {
            "main": f"/photos/0000/0001/{name}.jpg",
            "thumbnails": {"square": f"/photos/0000/0001/{name}_square.jpg"},
        }
        assert image_size(public_dir / "photos" / "0000" / "0001" / f"{name}.jpg") == (200, 200)
        assert DynamoDBRecords().fetch_record(record_id=1).image_file == name
        assert list(staging_dir.iterdir()) == []

    def test_sequential_ids(self, create_event, make_image, lambda_context) -> None:
        first = handler(create_event(make_image()), lambda_context)
        second = handler(create_event(make_image()), lambda_context)

        assert json.loads(first["body"])["record_id"] == 1
        assert json.loads(second["body"])["record_id"] == 2

    def test_too_small_upload_rejected(self, create_event, lambda_context, staging_dir: Path) -> None:
        response = handler(create_event(b"tiny"), lambda_context)

        assert response["statusCode"] == 422
        body = json.loads(response["body"])
        assert body["message"] == "The image is too small."
        assert body["details"]["errors"] == ["The image is too small."]
        assert DynamoDBRecords().fetch_record(record_id=1) is None
        assert list(staging_dir.iterdir()) == []

    def test_zero_byte_upload_rejected_as_too_small(
        self, create_event, lambda_context, public_dir: Path, staging_dir: Path
    ) -> None:
        response = handler(create_event(b""), lambda_context)

        assert response["statusCode"] == 422
        body = json.loads(response["body"])
        assert body["error"] == "VALIDATION_FAILED"
        assert body["message"] == "The image is too small."
        assert DynamoDBRecords().fetch_record(record_id=1) is None
        assert not public_dir.exists()
        assert list(staging_dir.iterdir()) == []

    def test_non_image_rejected(self, create_event, lambda_context, public_dir: Path) -> None:
        response = handler(create_event(b"GIF? no, plain text.\n" * 400), lambda_context)

        assert response["statusCode"] == 422
        assert json.loads(response["body"])["message"] == "Can't process the image."
        assert not public_dir.exists()

    def test_invalid_base64(self, lambda_context) -> None:
        event = {"httpMethod": "POST", "body": json.dumps({"file": "not-base64!!!"})}

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        errors = json.loads(response["body"])["details"]["errors"]
        assert errors[0]["field"] == "file"

    def test_missing_file(self, lambda_context) -> None:
        response = handler({"httpMethod": "POST", "body": json.dumps({"title": "x"})}, lambda_context)

        assert response["statusCode"] == 400

    def test_invalid_json(self, lambda_context) -> None:
        response = handler({"httpMethod": "POST", "body": "{not json"}, lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid JSON body"

    def test_install_failure_rolls_back_record(
        self, create_event, sample_jpeg, lambda_context, monkeypatch
    ) -> None:
        def fail(self, record_id: int):
            raise OSError("disk full")

        monkeypatch.setattr(AttachmentLifecycle, "after_create", fail)

        response = handler(create_event(sample_jpeg), lambda_context)

        assert response["statusCode"] == 503
        assert DynamoDBRecords().fetch_record(record_id=1) is None

    def test_options_preflight(self, lambda_context) -> None:
        response = handler({"httpMethod": "OPTIONS"}, lambda_context)

        assert response["statusCode"] == 204
