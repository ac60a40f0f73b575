"""Host document model: a logical and a physical structure tree."""

from dataclasses import dataclass, field
from typing import Any, Optional

from imagemeta.model.prefs import DocStructType, MetadataType, Prefs


@dataclass
class Metadata:
    """A typed metadata value attached to a structure element."""

    type: MetadataType
    value: str = ""


@dataclass(eq=False)
class Reference:
    target: "DocStruct"
    type: str


@dataclass(eq=False)
class DocStruct:
    """A node of the logical or physical structure."""

    type: DocStructType
    image_name: Optional[str] = None
    metadata: list[Metadata] = field(default_factory=list)
    children: list["DocStruct"] = field(default_factory=list, repr=False)
    references: list[Reference] = field(default_factory=list, repr=False)

    def add_metadata(self, metadata: Metadata) -> None:
        self.metadata.append(metadata)

    def get_all_metadata_by_type(self, metadata_type: MetadataType) -> list[Metadata]:
        return [md for md in self.metadata if md.type == metadata_type]

    def get_all_children(self) -> list["DocStruct"]:
        return list(self.children)

    def add_child(self, child: "DocStruct") -> None:
        self.children.append(child)

    def add_reference_to(self, target: "DocStruct", reference_type: str) -> Reference:
        reference = Reference(target=target, type=reference_type)
        self.references.append(reference)
        return reference

    def get_references(self, reference_type: Optional[str] = None) -> list[Reference]:
        if reference_type is None:
            return list(self.references)
        return [ref for ref in self.references if ref.type == reference_type]


@dataclass(eq=False)
class DigitalDocument:
    """Unified document object holding both structure views of a work."""

    logical: DocStruct
    physical: DocStruct

    def create_docstruct(self, docstruct_type: DocStructType) -> DocStruct:
        return DocStruct(type=docstruct_type)

    @property
    def pages(self) -> list[DocStruct]:
        return self.physical.get_all_children()

    def to_dict(self) -> dict[str, Any]:
        # references point into the physical tree and are stored as child index paths
        paths = {id(node): path for node, path in _walk(self.physical, [])}
        return {
            "logical": _node_to_dict(self.logical, paths),
            "physical": _node_to_dict(self.physical, paths),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], prefs: Prefs) -> "DigitalDocument":
        """Rebuild a document, resolving every type name through the ruleset."""
        physical = _node_from_dict(data["physical"], prefs)
        logical = _node_from_dict(data["logical"], prefs)
        _resolve_references(data["logical"], logical, physical)
        _resolve_references(data["physical"], physical, physical)
        return cls(logical=logical, physical=physical)

    def __repr__(self) -> str:
        return f"DigitalDocument(logical={self.logical.type.name}, pages={len(self.physical.children)})"


def _walk(node: DocStruct, path: list[int]):
    yield node, path
    for index, child in enumerate(node.children):
        yield from _walk(child, path + [index])


def _node_to_dict(node: DocStruct, paths: dict[int, list[int]]) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": node.type.name,
        "metadata": [{"type": md.type.name, "value": md.value} for md in node.metadata],
        "children": [_node_to_dict(child, paths) for child in node.children],
    }
    if node.image_name is not None:
        data["imageName"] = node.image_name
    if node.references:
        data["references"] = [
            {"type": ref.type, "target": paths[id(ref.target)]}
            for ref in node.references
            if id(ref.target) in paths
        ]
    return data


def _node_from_dict(data: dict[str, Any], prefs: Prefs) -> DocStruct:
    node = DocStruct(
        type=prefs.get_docstruct_type_by_name(data["type"]),
        image_name=data.get("imageName"),
    )
    for md in data.get("metadata", []):
        node.add_metadata(Metadata(prefs.get_metadata_type_by_name(md["type"]), md.get("value", "")))
    for child in data.get("children", []):
        node.add_child(_node_from_dict(child, prefs))
    return node


def _resolve_references(data: dict[str, Any], node: DocStruct, physical: DocStruct) -> None:
    for ref in data.get("references", []):
        target = physical
        for index in ref["target"]:
            target = target.children[index]
        node.add_reference_to(target, ref["type"])
    for child_data, child in zip(data.get("children", []), node.children):
        _resolve_references(child_data, child, physical)
