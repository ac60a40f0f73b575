"""Host object model: documents, type registry and processes."""

from imagemeta.model.document import DigitalDocument, DocStruct, Metadata, Reference
from imagemeta.model.prefs import DocStructType, MetadataType, Prefs, load_prefs
from imagemeta.model.process import Process, ProcessProperty, PropertyType

__all__ = [
    "DigitalDocument",
    "DocStruct",
    "DocStructType",
    "Metadata",
    "MetadataType",
    "Prefs",
    "Process",
    "ProcessProperty",
    "PropertyType",
    "Reference",
    "load_prefs",
]
