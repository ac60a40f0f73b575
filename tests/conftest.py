"""Pytest configuration and fixtures for imagemeta tests."""

import stat
from pathlib import Path
from typing import Callable

import pytest

from imagemeta.config import StepConfiguration
from imagemeta.host.memory import InMemoryHost
from imagemeta.model.document import DigitalDocument, DocStruct
from imagemeta.model.prefs import DocStructType, MetadataType, Prefs
from imagemeta.model.process import Process


@pytest.fixture
def prefs() -> Prefs:
    """Ruleset with the types used by the step."""
    return Prefs(
        metadata_types=[
            MetadataType("physPageNumber"),
            MetadataType("logicalPageNumber"),
            MetadataType("TitleDocMain"),
            MetadataType("creator"),
            MetadataType("Copyright"),
        ],
        docstruct_types=[
            DocStructType("Monograph"),
            DocStructType("BoundBook"),
            DocStructType("page"),
        ],
    )


@pytest.fixture
def document(prefs) -> DigitalDocument:
    """Document without any pages."""
    return DigitalDocument(
        logical=DocStruct(prefs.get_docstruct_type_by_name("Monograph")),
        physical=DocStruct(prefs.get_docstruct_type_by_name("BoundBook")),
    )


@pytest.fixture
def images_dir(tmp_path) -> Path:
    directory = tmp_path / "images"
    directory.mkdir()
    return directory


@pytest.fixture
def make_images(images_dir) -> Callable[..., list[Path]]:
    """Create empty image files in the image folder."""
    def _make(*names: str) -> list[Path]:
        paths = []
        for name in names:
            path = images_dir / name
            path.write_bytes(b"")
            paths.append(path)
        return paths
    return _make


@pytest.fixture
def process(tmp_path, images_dir, prefs) -> Process:
    return Process(
        id=42,
        title="test_process",
        metadata_file_path=tmp_path / "meta.json",
        images_directory=images_dir,
        prefs=prefs,
    )


@pytest.fixture
def host(process, document) -> InMemoryHost:
    host = InMemoryHost()
    host.add_document(process, document)
    return host


@pytest.fixture
def make_tool(tmp_path) -> Callable[..., str]:
    """Create an executable standing in for the metadata tool."""
    def _make(output: str = "", exit_code: int = 0, name: str = "fake_exiftool", sleep: int = 0) -> str:
        script = tmp_path / name
        body = ["#!/bin/sh"]
        if sleep:
            body.append(f"exec sleep {sleep}")
        body.append("cat <<'OUTPUT'")
        body.append(output)
        body.append("OUTPUT")
        body.append(f"exit {exit_code}")
        script.write_text("\n".join(body) + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)
    return _make


@pytest.fixture
def basic_config() -> StepConfiguration:
    return StepConfiguration.from_dict({
        "command": "/usr/bin/exiftool",
        "propertyContainer": 3,
        "field": [
            {"line": "Artist", "metadata": "creator", "property": "Image artist"},
            {"line": "Image Description", "metadata": "TitleDocMain"},
            {"line": "Copyright", "property": "Rights"},
        ],
    })
