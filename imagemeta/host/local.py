"""Host backend keeping documents and processes as JSON files on disk."""

import json
from pathlib import Path
from typing import Optional, Union

import aiofiles

from imagemeta.exceptions import DocumentLoadError, PersistenceError, UnknownTypeError
from imagemeta.host.base import HostPort
from imagemeta.model.document import DigitalDocument
from imagemeta.model.prefs import Prefs
from imagemeta.model.process import Process

PROCESS_FILENAME = "process.json"


class LocalHost(HostPort):
    """Local filesystem host.

    The document lives at `process.metadata_file_path`; the process record is
    stored as `process.json` in the same directory unless a path is given.
    """

    def __init__(self, process_file: Optional[Union[str, Path]] = None, encoding: str = "utf-8", **kwargs) -> None:
        super().__init__(**kwargs)
        self.process_file = Path(process_file) if process_file else None
        self.encoding = encoding

    def _process_path(self, process: Process) -> Path:
        if self.process_file is not None:
            return self.process_file
        return process.metadata_file_path.parent / PROCESS_FILENAME

    async def load_document(self, process: Process) -> DigitalDocument:
        path = process.metadata_file_path
        try:
            async with aiofiles.open(path, "r", encoding=self.encoding) as f:
                data = json.loads(await f.read())
            return DigitalDocument.from_dict(data, process.prefs)
        except UnknownTypeError:
            raise
        except (OSError, ValueError, KeyError, TypeError, IndexError) as e:
            raise DocumentLoadError(path, str(e)) from e

    async def save_document(self, process: Process, document: DigitalDocument) -> None:
        await self._write_json(process.metadata_file_path, document.to_dict(), "document")
        self.logger.info(f"Saved document to {process.metadata_file_path}")

    async def save_process(self, process: Process) -> None:
        path = self._process_path(process)
        await self._write_json(path, process.to_dict(), "process")
        self.logger.info(f"Saved process {process.id} to {path}")

    async def _write_json(self, path: Path, data: dict, target: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "w", encoding=self.encoding) as f:
                await f.write(json.dumps(data, ensure_ascii=False, indent=2))
        except OSError as e:
            raise PersistenceError(target, f"{path}: {e}") from e


def load_process(path: Union[str, Path], prefs: Prefs) -> Process:
    """Read a process record; relative paths in it resolve against its directory."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return Process.from_dict(data, prefs, base_path=path.parent)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise DocumentLoadError(path, f"invalid process file: {e}") from e
