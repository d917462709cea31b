from pathlib import Path

import pytest

from image_attach.lifecycle.attachment import AttachmentLifecycle
from image_attach.models.config import AttachmentConfig
from image_attach.models.errors import RecordNotFoundError


class RecordingWriter:
    """In-memory ImageNameWriter that records every write."""

    def __init__(self) -> None:
        self.names: dict[int, str | None] = {}
        self.calls: list[tuple[int, str | None]] = []

    def set_image_name(self, record_id: int, name: str | None) -> None:
        self.calls.append((record_id, name))
        self.names[record_id] = name


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def lifecycle(photo_config: AttachmentConfig, writer: RecordingWriter) -> AttachmentLifecycle:
    return AttachmentLifecycle(photo_config, writer)


class TestAssignImageData:
    def test_ignores_missing_data(self, lifecycle: AttachmentLifecycle) -> None:
        lifecycle.assign_image_data(None)

        assert not lifecycle.has_pending_image()

    @pytest.mark.parametrize("data", [b"", bytearray()])
    def test_zero_byte_upload_is_too_small(
        self,
        lifecycle: AttachmentLifecycle,
        writer: RecordingWriter,
        public_dir: Path,
        data,
    ) -> None:
        lifecycle.assign_image_data(data)

        assert lifecycle.has_pending_image()
        assert lifecycle.validate() == ["The image is too small."]

        lifecycle.discard_pending_image()
        assert writer.calls == []
        assert not public_dir.exists()

    def test_buffers_data(self, lifecycle: AttachmentLifecycle, sample_jpeg: bytes) -> None:
        lifecycle.assign_image_data(sample_jpeg)

        assert lifecycle.has_pending_image()
        lifecycle.discard_pending_image()
        assert not lifecycle.has_pending_image()


class TestCreate:
    def test_after_create_installs_and_persists_name(
        self,
        lifecycle: AttachmentLifecycle,
        writer: RecordingWriter,
        sample_jpeg: bytes,
        public_dir: Path,
        image_size,
    ) -> None:
        lifecycle.assign_image_data(sample_jpeg)
        assert lifecycle.validate() == []

        stored = lifecycle.after_create(42)

        assert stored is not None
        assert writer.calls == [(42, stored.name)]
        directory = public_dir / "photos" / "0000" / "0042"
        assert image_size(directory / f"{stored.name}.jpg") == (200, 200)
        assert image_size(directory / f"{stored.name}_square.jpg") == (50, 50)
        assert lifecycle.public_path(42, stored.name) == f"/photos/0000/0042/{stored.name}.jpg"
        assert lifecycle.absolute_path(42, stored.name, "square") == (
            directory / f"{stored.name}_square.jpg"
        )

    def test_after_create_without_image(
        self, lifecycle: AttachmentLifecycle, writer: RecordingWriter
    ) -> None:
        assert lifecycle.after_create(1) is None
        assert writer.calls == []

    def test_validation_messages(self, lifecycle: AttachmentLifecycle) -> None:
        lifecycle.assign_image_data(b"tiny")

        assert lifecycle.validate() == ["The image is too small."]
        lifecycle.discard_pending_image()


class TestUpdate:
    def test_replaces_old_files(
        self,
        lifecycle: AttachmentLifecycle,
        writer: RecordingWriter,
        make_image,
    ) -> None:
        lifecycle.assign_image_data(make_image())
        first = lifecycle.after_create(7)

        lifecycle.assign_image_data(make_image(size=(800, 600)))
        second = lifecycle.before_update(7, first.name)

        directory = lifecycle.absolute_path(7, second.name).parent
        assert sorted(p.name for p in directory.iterdir()) == sorted(
            [f"{second.name}.jpg", f"{second.name}_square.jpg"]
        )
        assert writer.calls == [(7, first.name), (7, None), (7, second.name)]

    def test_update_without_new_data_is_noop(
        self, lifecycle: AttachmentLifecycle, writer: RecordingWriter
    ) -> None:
        assert lifecycle.before_update(7, "abcdef") is None
        assert writer.calls == []

    def test_first_image_on_update(
        self, lifecycle: AttachmentLifecycle, writer: RecordingWriter, sample_jpeg: bytes
    ) -> None:
        lifecycle.assign_image_data(sample_jpeg)

        stored = lifecycle.before_update(8, None)

        assert writer.calls == [(8, stored.name)]


class TestDelete:
    def test_removes_files_and_clears_name(
        self, lifecycle: AttachmentLifecycle, writer: RecordingWriter, sample_jpeg: bytes
    ) -> None:
        lifecycle.assign_image_data(sample_jpeg)
        stored = lifecycle.after_create(3)
        directory = lifecycle.absolute_path(3, stored.name).parent

        lifecycle.before_delete(3, stored.name)

        assert not directory.exists()
        assert writer.names[3] is None

    def test_without_image_is_noop(
        self, lifecycle: AttachmentLifecycle, writer: RecordingWriter
    ) -> None:
        lifecycle.before_delete(3, None)

        assert writer.calls == []

    def test_twice_is_safe(
        self, lifecycle: AttachmentLifecycle, writer: RecordingWriter, sample_jpeg: bytes
    ) -> None:
        lifecycle.assign_image_data(sample_jpeg)
        stored = lifecycle.after_create(4)

        lifecycle.before_delete(4, stored.name)
        lifecycle.before_delete(4, stored.name)

        assert writer.names[4] is None

    def test_writer_failure_keeps_files(
        self, photo_config: AttachmentConfig, sample_jpeg: bytes
    ) -> None:
        class MissingRecordWriter(RecordingWriter):
            def set_image_name(self, record_id: int, name: str | None) -> None:
                if name is None:
                    raise RecordNotFoundError(message="Record not found")
                super().set_image_name(record_id, name)

        lifecycle = AttachmentLifecycle(photo_config, MissingRecordWriter())
        lifecycle.assign_image_data(sample_jpeg)
        stored = lifecycle.after_create(5)

        with pytest.raises(RecordNotFoundError):
            lifecycle.before_delete(5, stored.name)

        assert lifecycle.absolute_path(5, stored.name).exists()


def test_regenerate_thumbnails(lifecycle: AttachmentLifecycle, sample_jpeg: bytes) -> None:
    lifecycle.assign_image_data(sample_jpeg)
    stored = lifecycle.after_create(6)
    thumbnail = lifecycle.absolute_path(6, stored.name, "square")
    thumbnail.unlink()

    lifecycle.regenerate_thumbnails(6, stored.name)

    assert thumbnail.exists()


def test_thumbnails_and_paths(lifecycle: AttachmentLifecycle) -> None:
    assert lifecycle.thumbnails == ["square"]
    assert lifecycle.paths(1, "abc123").thumbnails == {
        "square": "/photos/0000/0001/abc123_square.jpg"
    }


def test_has_image() -> None:
    assert AttachmentLifecycle.has_image("abc123")
    assert not AttachmentLifecycle.has_image(None)
    assert not AttachmentLifecycle.has_image("")
