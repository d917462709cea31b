"""Random file names for stored images.

Stored files never reuse the uploaded file name: user supplied names may be
hard to handle on the command line or undesirable to publish. Uniqueness is
probabilistic; the partitioned directory layout confines a collision to a
single record's directory.
"""

import random
import time
import zlib

from image_attach.utils.constants import NAME_ALPHABET, NAME_LENGTH

_NAME_SPACE = len(NAME_ALPHABET) ** NAME_LENGTH


def to_base36(value: int, length: int = NAME_LENGTH) -> str:
    """Encode a non-negative integer in base 36, left padded with zeros."""
    if value < 0:
        raise ValueError("value must be non-negative")

    digits: list[str] = []
    while value:
        value, remainder = divmod(value, len(NAME_ALPHABET))
        digits.append(NAME_ALPHABET[remainder])

    return "".join(reversed(digits)).rjust(length, "0")


def generate_name() -> str:
    """Generate a 6-character base-36 token from a checksum of time and a random value."""
    seed = f"{time.time_ns()}{random.randrange(10**11)}"
    checksum = zlib.crc32(seed.encode("utf-8"))
    return to_base36(checksum % _NAME_SPACE)
