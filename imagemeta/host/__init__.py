"""Host backends for loading and saving documents and processes."""

from imagemeta.host.base import HostPort
from imagemeta.host.local import LocalHost, load_process
from imagemeta.host.memory import InMemoryHost

__all__ = [
    "HostPort",
    "InMemoryHost",
    "LocalHost",
    "load_process",
]
