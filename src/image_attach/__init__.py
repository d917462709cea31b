"""Image attachment package."""

__version__ = "1.0.0"
__description__ = (
    "Validated, resized image attachments with thumbnails for host records"
)

__all__ = ["handlers", "lifecycle", "models", "processing", "storage"]
