"""
Hash primitives for term signatures.

Every primitive maps a string to a fixed-width hex digest. Only determinism
and equality matter to callers: the same input yields the same value in any
process, and the two graphs under comparison must use the same primitive.
"""

import hashlib
from typing import Callable


HashFunction = Callable[[str], str]

DEFAULT_HASH_ALGORITHM = "sha1"


def sha1_hex(data: str) -> str:
    """SHA-1 digest of the UTF-8 encoded input, as 40 hex characters."""
    return hashlib.sha1(data.encode("utf-8")).hexdigest()


def md5_hex(data: str) -> str:
    """MD5 digest of the UTF-8 encoded input, as 32 hex characters."""
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def blake2b_hex(data: str) -> str:
    """BLAKE2b digest truncated to 128 bits, as 32 hex characters."""
    return hashlib.blake2b(data.encode("utf-8"), digest_size=16).hexdigest()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "sha1": sha1_hex,
    "md5": md5_hex,
    "blake2b": blake2b_hex,
}


def get_hash_function(name: str = DEFAULT_HASH_ALGORITHM) -> HashFunction:
    """
    Look up a hash primitive by name.

    Raises:
        ValueError: If the algorithm is not registered.
    """
    try:
        return HASH_FUNCTIONS[name.lower()]
    except KeyError:
        available = ", ".join(sorted(HASH_FUNCTIONS))
        raise ValueError(f"Unknown hash algorithm: {name} (available: {available})") from None
