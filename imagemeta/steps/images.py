"""Listing and ordering of the page images of a process."""

import re
from pathlib import Path
from typing import Iterable, Optional, Union

from imagemeta.exceptions import ImageDirectoryError

IMAGE_NAME_PATTERN = re.compile(r"(.*)_(\d+)\.jpg")


def list_images(directory: Union[str, Path]) -> list[Path]:
    """Return the regular files directly inside `directory` (may be empty)."""
    directory = Path(directory)
    if not directory.is_dir():
        raise ImageDirectoryError(directory, "not a directory")
    try:
        return [p for p in directory.iterdir() if p.is_file()]
    except OSError as e:
        raise ImageDirectoryError(directory, str(e)) from e


def image_number(path: Union[str, Path]) -> Optional[int]:
    """Page number encoded in a `<prefix>_<digits>.jpg` file name, or None."""
    match = IMAGE_NAME_PATTERN.fullmatch(Path(path).name)
    if match is None:
        return None
    return int(match.group(2))


def image_sort_key(path: Union[str, Path]) -> tuple[int, int, str]:
    """Sort key: numbered images by number, then any other file by name."""
    name = Path(path).name
    number = image_number(name)
    if number is None:
        return (1, 0, name)
    return (0, number, name)


def order_images(images: Iterable[Union[str, Path]]) -> list[Path]:
    return sorted((Path(p) for p in images), key=image_sort_key)
