"""Writing extracted values into the document and the process properties."""

from dataclasses import dataclass
from typing import Iterable

from imagemeta.config import StepConfiguration
from imagemeta.logging import get_logger
from imagemeta.model.document import DocStruct, Metadata
from imagemeta.model.prefs import Prefs
from imagemeta.model.process import Process, ProcessProperty, PropertyType
from imagemeta.steps.extraction.parser import extract_values

logger = get_logger("extraction.merge")


@dataclass
class MergeSummary:
    metadata_written: int = 0
    properties_written: int = 0


def set_metadata_value(logical: DocStruct, prefs: Prefs, type_name: str, value: str) -> Metadata:
    """Overwrite the first metadata of a type, or add one if there is none."""
    metadata_type = prefs.get_metadata_type_by_name(type_name)
    existing = logical.get_all_metadata_by_type(metadata_type)
    if existing:
        existing[0].value = value
        return existing[0]
    metadata = Metadata(metadata_type, value)
    logical.add_metadata(metadata)
    return metadata


def set_property_value(process: Process, title: str, value: str, container: int) -> ProcessProperty:
    """Update the property with this title, or append a new one."""
    prop = process.get_property(title)
    if prop is None:
        prop = ProcessProperty(title=title, value=value)
        process.properties.append(prop)
    prop.value = value
    prop.container = container
    prop.type = PropertyType.STRING
    prop.required = False
    return prop


def merge_response(
    lines: Iterable[str], config: StepConfiguration, logical: DocStruct, process: Process
) -> MergeSummary:
    """Apply both prefix mappings to every output line.

    Raises:
        UnknownTypeError: If a matched line maps to a metadata type missing from
            the process ruleset.
    """
    lines = list(lines)
    summary = MergeSummary()

    for match in extract_values(lines, config.line_to_metadata_field):
        set_metadata_value(logical, process.prefs, match.target, match.value)
        summary.metadata_written += 1
        logger.debug(f"{match.target} = {match.value!r}")

    for match in extract_values(lines, config.line_to_property_name):
        set_property_value(process, match.target, match.value, config.property_container)
        summary.properties_written += 1
        logger.debug(f"property {match.target} = {match.value!r}")

    return summary
