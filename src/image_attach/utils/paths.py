"""Partitioned directory layout and file naming for stored images."""

from image_attach.utils.constants import MAX_RECORD_ID, PARTITION_DIGITS, PARTITION_GROUP


def partitioned_path(record_id: int) -> list[str]:
    """Split a record id into fixed-width directory segments.

    The id is zero padded to eight digits and cut into groups of four,
    so no directory ever holds more than 10,000 entries.

    Example:
        partitioned_path(13) -> ["0000", "0013"]
    """
    if isinstance(record_id, bool) or not isinstance(record_id, int):
        raise ValueError(f"record id must be an integer, got {record_id!r}")

    if record_id < 1 or record_id > MAX_RECORD_ID:
        raise ValueError(f"record id out of range: {record_id}")

    padded = f"{record_id:0{PARTITION_DIGITS}d}"
    return [
        padded[start : start + PARTITION_GROUP]
        for start in range(0, PARTITION_DIGITS, PARTITION_GROUP)
    ]


def extension_for(output_format: str) -> str:
    """Return the file extension for an output format ("JPEG" -> "jpg")."""
    return output_format.lower().replace("jpeg", "jpg")


def file_name_for(name: str, extension: str, thumbnail: str | None = None) -> str:
    """Join the stored name, optional thumbnail label and extension.

    Example:
        file_name_for("abc123", "jpg", "thumb") -> "abc123_thumb.jpg"
    """
    stem = "_".join(part for part in (name, thumbnail) if part)
    return f"{stem}.{extension}"
