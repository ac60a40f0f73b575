"""Tests for the image metadata extraction step."""

from unittest.mock import AsyncMock, patch

import pytest
import yaml

from imagemeta.config import StepConfiguration
from imagemeta.exceptions import ExtractionToolError
from imagemeta.host.local import LocalHost
from imagemeta.model.document import Metadata
from imagemeta.steps.metadata_step import (
    ImageMetadataExtractionStep,
    PluginGuiType,
    PluginReturnValue,
)

TOOL_OUTPUT = """ExifTool Version Number         : 12.40
File Name                       : page_1.jpg
Artist                          : Jane Doe
Image Description               : Example Work
Copyright                       : CC BY 4.0"""


def _field(document, type_name):
    return [md.value for md in document.logical.metadata if md.type.name == type_name]


class TestImageMetadataExtractionStep:
    """Test suite for the step orchestration."""

    def test_plugin_surface(self, basic_config, host, process):
        step = ImageMetadataExtractionStep(basic_config, host, process, return_path="/task_edit.xhtml")

        assert step.title == "intranda_step_imageMetadataExtraction"
        assert step.gui_type == PluginGuiType.NONE
        assert step.page_path == "/uii/plugin_step_imageMetadataExtraction.xhtml"
        assert step.interface_version == 0
        assert step.validate() is None
        assert step.cancel() == "/uii/task_edit.xhtml"
        assert step.finish() == "/uii/task_edit.xhtml"

    @pytest.mark.asyncio
    async def test_end_to_end_with_mocked_tool_output(self, host, process, document, make_images):
        make_images("page_1.jpg")
        config = StepConfiguration.from_dict({"command": "echo", "field": [{"line": "Title", "metadata": "TitleDocMain"}]})
        step = ImageMetadataExtractionStep(config, host, process)

        with patch(
            "imagemeta.steps.metadata_step.read_image_metadata",
            new_callable=AsyncMock,
            return_value=["Title: Example Work"],
        ) as mock_read:
            result = await step.run()

        assert result == PluginReturnValue.FINISH
        mock_read.assert_awaited_once_with("echo", process.images_directory / "page_1.jpg", timeout=60.0)
        assert _field(host.documents[process.id], "TitleDocMain") == ["Example Work"]
        assert host.document_saves == 1
        assert host.process_saves == 1

    @pytest.mark.asyncio
    async def test_end_to_end_with_echo_command(self, host, process, document, tmp_path):
        # echo prints the image path, so the folder name provides the matched line
        images = tmp_path / "Title: Example Work"
        images.mkdir()
        (images / "page_1.jpg").write_bytes(b"")
        process.images_directory = images
        config = StepConfiguration.from_dict({"command": "echo", "field": [{"line": str(tmp_path), "metadata": "TitleDocMain"}]})
        step = ImageMetadataExtractionStep(config, host, process)

        assert await step.run() == PluginReturnValue.FINISH

        assert _field(host.documents[process.id], "TitleDocMain") == ["Example Work/page_1.jpg"]
        assert step.last_result.metadata_written == 1
        assert host.document_saves == 1
        assert host.process_saves == 1

    @pytest.mark.asyncio
    async def test_call_runs_the_step(self, basic_config, host, process, document, make_images, make_tool):
        make_images("page_1.jpg")
        config = basic_config.model_copy(update={"command": make_tool("Artist: Jane Doe")})
        step = ImageMetadataExtractionStep(config, host, process)

        assert await step() is True
        assert step.last_result.status == PluginReturnValue.FINISH
        assert _field(document, "creator") == ["Jane Doe"]

    @pytest.mark.asyncio
    async def test_debug_logs_tool_output(self, basic_config, host, process, make_images, make_tool):
        make_images("page_1.jpg")
        config = basic_config.model_copy(update={"command": make_tool("Artist: Jane Doe")})
        quiet = ImageMetadataExtractionStep(config, host, process)
        step = ImageMetadataExtractionStep(config, host, process, debug=True)
        assert quiet.debug is False
        assert step.debug is True

        with patch.object(step, "logger") as mock_logger:
            assert await step.run() == PluginReturnValue.FINISH

        mock_logger.debug.assert_any_call("page_1.jpg: Artist: Jane Doe")

    @pytest.mark.asyncio
    async def test_full_run_with_tool(self, basic_config, host, process, document, make_images, make_tool):
        make_images("page_10.jpg", "page_2.jpg", "page_1.jpg")
        config = basic_config.model_copy(update={"command": make_tool(TOOL_OUTPUT), "timeout": 10.0})
        step = ImageMetadataExtractionStep(config, host, process)

        assert await step.execute() is True

        pages = document.pages
        assert [p.image_name.rsplit("/", 1)[-1] for p in pages] == ["page_1.jpg", "page_2.jpg", "page_10.jpg"]
        assert _field(document, "creator") == ["Jane Doe"]
        assert _field(document, "TitleDocMain") == ["Example Work"]
        assert process.get_property("Image artist").value == "Jane Doe"
        assert process.get_property("Rights").value == "CC BY 4.0"

        result = step.last_result
        assert result.is_success
        assert result.pages_created == 3
        assert result.image.name == "page_1.jpg"
        assert result.metadata_written == 2
        assert result.properties_written == 2

    @pytest.mark.asyncio
    async def test_second_run_updates_instead_of_duplicating(self, basic_config, host, process, document, make_images, make_tool):
        make_images("page_1.jpg", "page_2.jpg")
        first = basic_config.model_copy(update={"command": make_tool("Artist: Jane Doe", name="tool1")})
        second = basic_config.model_copy(update={"command": make_tool("Artist: John Roe", name="tool2")})

        assert await ImageMetadataExtractionStep(first, host, process).run() == PluginReturnValue.FINISH
        assert await ImageMetadataExtractionStep(second, host, process).run() == PluginReturnValue.FINISH

        assert _field(document, "creator") == ["John Roe"]
        assert [p.value for p in process.get_properties_by_title("Image artist")] == ["John Roe"]
        assert len(document.pages) == 2

    @pytest.mark.asyncio
    async def test_existing_pagination_is_kept(self, basic_config, host, process, document, prefs, make_images, make_tool):
        page = document.create_docstruct(prefs.get_docstruct_type_by_name("page"))
        page.add_metadata(Metadata(prefs.get_metadata_type_by_name("physPageNumber"), "1"))
        document.physical.add_child(page)
        make_images("page_1.jpg", "page_2.jpg", "page_3.jpg")
        config = basic_config.model_copy(update={"command": make_tool("Artist: Jane Doe")})

        step = ImageMetadataExtractionStep(config, host, process)
        assert await step.run() == PluginReturnValue.FINISH

        assert document.pages == [page]
        assert step.last_result.pages_created == 0

    @pytest.mark.asyncio
    async def test_empty_image_folder_is_an_error(self, basic_config, host, process):
        step = ImageMetadataExtractionStep(basic_config, host, process)

        assert await step.run() == PluginReturnValue.ERROR
        assert step.last_result.stage == "extraction"
        assert "No images" in step.last_result.error_message
        assert host.document_saves == 0
        assert host.process_saves == 0

    @pytest.mark.asyncio
    async def test_missing_document_is_an_error(self, basic_config, process, make_images):
        from imagemeta.host.memory import InMemoryHost

        make_images("page_1.jpg")
        step = ImageMetadataExtractionStep(basic_config, InMemoryHost(), process)

        assert await step.execute() is False
        assert step.last_result.stage == "load"

    @pytest.mark.asyncio
    async def test_missing_image_folder_is_an_error(self, basic_config, host, process, tmp_path):
        process.images_directory = tmp_path / "nowhere"
        step = ImageMetadataExtractionStep(basic_config, host, process)

        assert await step.run() == PluginReturnValue.ERROR
        assert step.last_result.stage == "images"

    @pytest.mark.asyncio
    async def test_tool_failure_is_an_error(self, basic_config, host, process, make_images):
        make_images("page_1.jpg")
        step = ImageMetadataExtractionStep(basic_config, host, process)

        with patch(
            "imagemeta.steps.metadata_step.read_image_metadata",
            new_callable=AsyncMock,
            side_effect=ExtractionToolError("exiftool", "cannot start"),
        ):
            assert await step.run() == PluginReturnValue.ERROR

        assert step.last_result.stage == "extraction"
        # pages were created in memory but nothing was saved
        assert len(host.documents[process.id].pages) == 1
        assert host.document_saves == 0

    @pytest.mark.asyncio
    async def test_unknown_metadata_type_is_an_error(self, host, process, make_images, make_tool):
        make_images("page_1.jpg")
        config = StepConfiguration.from_dict({
            "command": make_tool("Artist: Jane Doe"),
            "field": [{"line": "Artist", "metadata": "Photographer"}],
        })
        step = ImageMetadataExtractionStep(config, host, process)

        assert await step.run() == PluginReturnValue.ERROR
        assert step.last_result.stage == "merge"
        assert host.document_saves == 0

    @pytest.mark.asyncio
    async def test_document_save_failure_is_an_error(self, basic_config, host, process, make_images, make_tool):
        make_images("page_1.jpg")
        host.fail_document_save = "disk full"
        config = basic_config.model_copy(update={"command": make_tool("Artist: Jane Doe")})
        step = ImageMetadataExtractionStep(config, host, process)

        assert await step.run() == PluginReturnValue.ERROR
        assert step.last_result.stage == "persistence"
        assert "disk full" in step.last_result.error_message
        assert host.document_saves == 0
        # the process is not saved after a failed document save
        assert host.process_saves == 0

    @pytest.mark.asyncio
    async def test_process_save_failure_is_an_error(self, basic_config, host, process, make_images, make_tool):
        make_images("page_1.jpg")
        host.fail_process_save = "database down"
        config = basic_config.model_copy(update={"command": make_tool("Artist: Jane Doe")})
        step = ImageMetadataExtractionStep(config, host, process)

        assert await step.run() == PluginReturnValue.ERROR
        assert step.last_result.stage == "persistence"
        assert host.document_saves == 1
        # in-memory changes are not rolled back
        assert process.get_property("Image artist").value == "Jane Doe"

    @pytest.mark.asyncio
    async def test_from_config_file_and_local_host(self, tmp_path, process, document, make_images, make_tool):
        make_images("page_1.jpg")
        process.project = "Manuscripts"
        config_path = tmp_path / "plugin_config.yaml"
        config_path.write_text(yaml.safe_dump({
            "config": [
                {"project": "*", "step": "*", "command": "/bin/false"},
                {
                    "project": "Manuscripts",
                    "step": "Read image metadata",
                    "command": make_tool("Image Description: Example Work"),
                    "field": [{"line": "Image Description", "metadata": "TitleDocMain"}],
                },
            ]
        }))
        local = LocalHost()
        await local.save_document(process, document)

        step = ImageMetadataExtractionStep.from_config_file(config_path, local, process, step_name="Read image metadata")
        assert await step.run() == PluginReturnValue.FINISH

        saved = await local.load_document(process)
        assert _field(saved, "TitleDocMain") == ["Example Work"]
        assert len(saved.pages) == 1
        assert (process.metadata_file_path.parent / "process.json").exists()
