"""Interface to the host system owning documents and processes."""

from abc import ABC, abstractmethod

from imagemeta.logging import get_logger
from imagemeta.model.document import DigitalDocument
from imagemeta.model.process import Process


class HostPort(ABC):
    """Base class for host backends."""

    def __init__(self, **kwargs) -> None:
        self.logger = get_logger(f"host.{self.__class__.__name__}")

    @abstractmethod
    async def load_document(self, process: Process) -> DigitalDocument:
        """Read the document of a process.

        Args:
            process: Process whose metadata file is read.

        Returns:
            The loaded document.

        Raises:
            DocumentLoadError: If the document cannot be read.
        """
        pass

    @abstractmethod
    async def save_document(self, process: Process, document: DigitalDocument) -> None:
        """Write the document back to its original location.

        Raises:
            PersistenceError: If the document cannot be written.
        """
        pass

    @abstractmethod
    async def save_process(self, process: Process) -> None:
        """Persist the process, including its properties.

        Raises:
            PersistenceError: If the process cannot be written.
        """
        pass
