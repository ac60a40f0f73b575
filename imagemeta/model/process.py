"""Process record owned by the host, with its properties."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from imagemeta.config import WILDCARD
from imagemeta.model.prefs import Prefs


class PropertyType(Enum):
    """Value types of process properties."""
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    DATE = "date"


@dataclass
class ProcessProperty:
    title: str
    value: str
    container: int = 0
    type: PropertyType = PropertyType.STRING
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "value": self.value,
            "container": self.container,
            "type": self.type.value,
            "required": self.required,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProcessProperty":
        return cls(
            title=data["title"],
            value=data.get("value", ""),
            container=int(data.get("container", 0)),
            type=PropertyType(data.get("type", PropertyType.STRING.value)),
            required=bool(data.get("required", False)),
        )


@dataclass
class Process:
    """A workflow process: its document location, images and properties."""

    id: int
    title: str
    metadata_file_path: Path
    images_directory: Path
    prefs: Prefs = field(repr=False)
    project: str = WILDCARD
    properties: list[ProcessProperty] = field(default_factory=list)

    def __post_init__(self):
        self.metadata_file_path = Path(self.metadata_file_path)
        self.images_directory = Path(self.images_directory)

    def get_properties_by_title(self, title: str) -> list[ProcessProperty]:
        return [prop for prop in self.properties if prop.title == title]

    def get_property(self, title: str) -> Optional[ProcessProperty]:
        return next((prop for prop in self.properties if prop.title == title), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "project": self.project,
            "metadataFile": str(self.metadata_file_path),
            "imagesDirectory": str(self.images_directory),
            "properties": [prop.to_dict() for prop in self.properties],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], prefs: Prefs, base_path: Optional[Path] = None) -> "Process":
        """Create a process from its stored form; relative paths resolve against `base_path`."""
        def resolve(value: str) -> Path:
            path = Path(value)
            if base_path is not None and not path.is_absolute():
                return base_path / path
            return path

        return cls(
            id=int(data["id"]),
            title=data.get("title", str(data["id"])),
            project=data.get("project", WILDCARD),
            metadata_file_path=resolve(data["metadataFile"]),
            images_directory=resolve(data["imagesDirectory"]),
            prefs=prefs,
            properties=[ProcessProperty.from_dict(p) for p in data.get("properties", [])],
        )
