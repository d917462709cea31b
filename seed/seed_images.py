#!/usr/bin/env python3
"""
Seed the record table by POSTing a directory of images to the create endpoint.

Run:
    python seed/seed_images.py --api-id <API-ID> --images-dir ./sample-images
"""

import argparse
import base64
from pathlib import Path
import sys
from typing import Any

from aws_lambda_powertools import Logger
import requests

logger = Logger(service="seed")

LOCALSTACK_RECORDS_URL = "http://localhost:4566/restapis/{api_id}/snd/_user_request_/v1/records"
IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create one record per image in a directory")
    parser.add_argument("--api-id", required=True, help="API Gateway id (LocalStack)")
    parser.add_argument("--api-key", help="value for the x-api-key header")
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=Path(__file__).parent / "images",
        help="directory scanned (non-recursively) for images",
    )
    parser.add_argument("--limit", type=int, default=4, help="upload at most this many images")
    return parser.parse_args(argv)


def find_images(images_dir: Path, limit: int) -> list[Path]:
    candidates = (p for p in images_dir.iterdir() if p.is_file())
    return sorted(p for p in candidates if p.suffix.lower() in IMAGE_SUFFIXES)[:limit]


def seed_one(session: requests.Session, url: str, image_path: Path) -> bool:
    """Create a record titled after the file; True when the API answered 201."""
    payload = {
        "file": base64.b64encode(image_path.read_bytes()).decode("ascii"),
        "title": image_path.stem,
    }
    response = session.post(url, json=payload, timeout=30)
    body: dict[str, Any] = response.json() if response.content else {}

    if response.status_code != 201:
        logger.error(
            "Record not created",
            extra={"image": image_path.name, "status": response.status_code, "body": body},
        )
        return False

    logger.info(
        "Record created",
        extra={"image": image_path.name, "record_id": body.get("record_id"), "paths": body.get("paths")},
    )
    return True


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    url = LOCALSTACK_RECORDS_URL.format(api_id=args.api_id)
    images = find_images(args.images_dir, args.limit)
    logger.info("Seeding records", extra={"url": url, "images": len(images)})

    with requests.Session() as session:
        if args.api_key:
            session.headers["x-api-key"] = args.api_key
        try:
            failures = sum(not seed_one(session, url, path) for path in images)
        except requests.RequestException:
            logger.exception("Seeding aborted")
            return 1

    logger.info("Seeding finished", extra={"created": len(images) - failures, "failed": failures})
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
