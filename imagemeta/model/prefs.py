"""Ruleset of structure and metadata types known to the host."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from imagemeta.exceptions import ConfigurationError, UnknownTypeError


@dataclass(frozen=True)
class MetadataType:
    name: str
    label: Optional[str] = None


@dataclass(frozen=True)
class DocStructType:
    name: str
    label: Optional[str] = None


class Prefs:
    """Type registry used to resolve structure and metadata type names."""

    def __init__(
        self,
        metadata_types: Iterable[MetadataType] = (),
        docstruct_types: Iterable[DocStructType] = (),
    ):
        self._metadata_types = {t.name: t for t in metadata_types}
        self._docstruct_types = {t.name: t for t in docstruct_types}

    def __repr__(self) -> str:
        return f"Prefs(metadata_types={len(self._metadata_types)}, docstruct_types={len(self._docstruct_types)})"

    @property
    def metadata_type_names(self) -> list[str]:
        return list(self._metadata_types)

    @property
    def docstruct_type_names(self) -> list[str]:
        return list(self._docstruct_types)

    def get_metadata_type_by_name(self, name: str) -> MetadataType:
        try:
            return self._metadata_types[name]
        except KeyError:
            raise UnknownTypeError("metadata", name) from None

    def get_docstruct_type_by_name(self, name: str) -> DocStructType:
        try:
            return self._docstruct_types[name]
        except KeyError:
            raise UnknownTypeError("structure", name) from None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Prefs":
        """Build a registry from `metadataTypes` and `docStructTypes` lists.

        Entries are either plain names or mappings with `name` and `label`.
        """
        def entries(key):
            for entry in data.get(key) or []:
                if isinstance(entry, str):
                    yield entry, None
                else:
                    yield entry["name"], entry.get("label")

        return cls(
            metadata_types=[MetadataType(n, l) for n, l in entries("metadataTypes")],
            docstruct_types=[DocStructType(n, l) for n, l in entries("docStructTypes")],
        )


def load_prefs(path: Union[str, Path]) -> Prefs:
    """Load a ruleset from a YAML file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Prefs.from_dict(data)
    except (OSError, yaml.YAMLError, KeyError, TypeError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load ruleset {path}: {e}") from e
