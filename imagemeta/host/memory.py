"""In-memory host used for tests and dry runs."""

import copy
from typing import Optional

from imagemeta.exceptions import DocumentLoadError, PersistenceError
from imagemeta.host.base import HostPort
from imagemeta.model.document import DigitalDocument
from imagemeta.model.process import Process


class InMemoryHost(HostPort):
    """Keeps documents by process id and counts save calls."""

    def __init__(self, documents: Optional[dict[int, DigitalDocument]] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.documents: dict[int, DigitalDocument] = dict(documents or {})
        self.saved_processes: dict[int, list[dict]] = {}
        self.document_saves = 0
        self.process_saves = 0
        self.fail_document_save: Optional[str] = None
        self.fail_process_save: Optional[str] = None

    def add_document(self, process: Process, document: DigitalDocument) -> None:
        self.documents[process.id] = document

    async def load_document(self, process: Process) -> DigitalDocument:
        try:
            return self.documents[process.id]
        except KeyError:
            raise DocumentLoadError(process.metadata_file_path, "no document stored for process") from None

    async def save_document(self, process: Process, document: DigitalDocument) -> None:
        if self.fail_document_save:
            raise PersistenceError("document", self.fail_document_save)
        self.documents[process.id] = document
        self.document_saves += 1
        self.logger.debug(f"Stored document of process {process.id}")

    async def save_process(self, process: Process) -> None:
        if self.fail_process_save:
            raise PersistenceError("process", self.fail_process_save)
        # snapshot so later mutations do not leak into what was saved
        self.saved_processes.setdefault(process.id, []).append(copy.deepcopy(process.to_dict()))
        self.process_saves += 1
        self.logger.debug(f"Stored process {process.id} with {len(process.properties)} properties")
