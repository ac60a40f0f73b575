"""Exceptions raised by the image metadata extraction step."""

from pathlib import Path
from typing import Optional, Union


class ImageMetadataError(Exception):
    """Base exception for all errors of the extraction step."""

    stage = "run"


class ConfigurationError(ImageMetadataError):
    """Raised when the plugin configuration cannot be loaded or is invalid."""

    stage = "configuration"


class DocumentLoadError(ImageMetadataError):
    """Raised when the document of a process cannot be read."""

    stage = "load"

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load document {self.path}: {reason}")


class ImageDirectoryError(ImageMetadataError):
    """Raised when the image directory of a process cannot be listed."""

    stage = "images"

    def __init__(self, directory: Union[str, Path], reason: str):
        self.directory = Path(directory)
        super().__init__(f"Cannot list image directory {self.directory}: {reason}")


class NoImagesError(ImageMetadataError):
    """Raised when there is no image to read metadata from."""

    stage = "extraction"


class UnknownTypeError(ImageMetadataError):
    """Raised when a structure or metadata type is missing from the ruleset."""

    stage = "ruleset"

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind} type: {name!r}")


class ExtractionToolError(ImageMetadataError):
    """Raised when the external metadata tool cannot be run or fails."""

    stage = "extraction"

    def __init__(self, command: str, reason: str, returncode: Optional[int] = None):
        self.command = command
        self.reason = reason
        self.returncode = returncode
        super().__init__(f"Metadata tool {command!r} failed: {reason}")


class PersistenceError(ImageMetadataError):
    """Raised when the host fails to save the document or the process."""

    stage = "persistence"

    def __init__(self, target: str, reason: str):
        self.target = target
        super().__init__(f"Failed to save {target}: {reason}")
