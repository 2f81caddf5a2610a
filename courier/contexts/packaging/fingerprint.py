"""
Package fingerprinting and naming.

A package is named after its recipient and the content of its source files:

    jane-doe_0790feebb1
    └──┬───┘ └───┬────┘
    recipient   first 10 hex chars of the sha1 over all source bytes

Sources are hashed in sorted path order so the same set of files yields the same
name no matter how the caller lists them.
"""

import hashlib
import re
from pathlib import Path
from typing import Iterable, Union

HASH_PREFIX_LENGTH = 10
READ_CHUNK_SIZE = 64 * 1024

# Word boundaries for param-case: lower->Upper ("JaneDoe") and ACRONYMWord ("PDFFile")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]+")


def generate_hash(files: Iterable[Union[str, Path]]) -> str:
    """
    Compute a sha1 hex digest over the contents of several files.

    Files are read in lexicographic path order and streamed into a single
    accumulator, so the result depends only on the set of files and their bytes.

    Args:
        files: Paths of the files to hash (not mutated)

    Returns:
        Full hex digest (40 chars)

    Raises:
        OSError: If any file can't be opened or read
    """
    shasum = hashlib.sha1()
    for file in sorted(str(f) for f in files):
        with open(file, "rb") as stream:
            for chunk in iter(lambda: stream.read(READ_CHUNK_SIZE), b""):
                shasum.update(chunk)
    return shasum.hexdigest()


def to_param_case(text: str) -> str:
    """
    Convert text to lowercase dash-separated words.

    Examples:
        >>> to_param_case("Jane Doe")
        'jane-doe'
        >>> to_param_case("JaneDoe")
        'jane-doe'
        >>> to_param_case("  ACME_Corp. ")
        'acme-corp'
    """
    spaced = _CAMEL_BOUNDARY.sub(" ", text)
    words = [word for word in _NON_ALPHANUMERIC.split(spaced) if word]
    return "-".join(word.lower() for word in words)


def package_name(recipient_name: str, files: Iterable[Union[str, Path]]) -> str:
    """
    Build the package name from the recipient and the source files.

    Args:
        recipient_name: Recipient's name, converted to param-case for the prefix
        files: Paths of the source files the fingerprint is based on

    Returns:
        "<param-case-recipient>_<first 10 hex chars of digest>"
    """
    prefix = to_param_case(recipient_name)
    return f"{prefix}_{generate_hash(files)[:HASH_PREFIX_LENGTH]}"
