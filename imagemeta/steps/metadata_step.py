"""
Image metadata extraction step.

Reads the document of a process, creates the pagination from the image
folder if the document has none, runs the configured metadata tool on the
first image and writes the matched values into the logical structure and the
process properties before saving both.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from imagemeta.base_step import PipelineStep
from imagemeta.config import StepConfiguration, load_step_config
from imagemeta.exceptions import ImageMetadataError
from imagemeta.host.base import HostPort
from imagemeta.model.process import Process
from imagemeta.steps.extraction.command import first_image, read_image_metadata
from imagemeta.steps.extraction.merge import merge_response
from imagemeta.steps.images import list_images, order_images
from imagemeta.steps.pagination import synchronize_pagination


class PluginReturnValue(Enum):
    """Outcome reported to the workflow."""
    FINISH = "finish"
    ERROR = "error"


class PluginGuiType(Enum):
    NONE = "none"
    PART = "part"
    FULL = "full"


class PluginType(Enum):
    STEP = "step"


@dataclass
class StepResult:
    """Details of the last run, kept for callers and diagnostics."""

    status: PluginReturnValue
    stage: str
    pages_created: int = 0
    image: Optional[Path] = None
    metadata_written: int = 0
    properties_written: int = 0
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == PluginReturnValue.FINISH


class ImageMetadataExtractionStep(PipelineStep):
    """Workflow step copying image metadata into the document and process."""

    title = "intranda_step_imageMetadataExtraction"
    page_path = "/uii/plugin_step_imageMetadataExtraction.xhtml"
    gui_type = PluginGuiType.NONE
    plugin_type = PluginType.STEP
    interface_version = 0

    def __init__(
        self,
        config: StepConfiguration,
        host: HostPort,
        process: Process,
        return_path: str = "",
        debug: bool = False,
    ):
        """
        Initialize the step for one process.

        Args:
            config: Step configuration resolved for the process's project and step
            host: Host backend loading and saving the document and process
            process: Process to work on
            return_path: Page the workflow returns to after `cancel`/`finish`
            debug: Log the raw tool output at debug level
        """
        super().__init__(config, debug=debug)
        self.host = host
        self.process = process
        self.return_path = return_path
        self.last_result: Optional[StepResult] = None
        self.logger.info("ImageMetadataExtraction step initialized")

    @classmethod
    def from_config_file(
        cls,
        config_path: Union[str, Path],
        host: HostPort,
        process: Process,
        step_name: str = "*",
        return_path: str = "",
        debug: bool = False,
    ) -> "ImageMetadataExtractionStep":
        """Create the step with the configuration block matching the process project and step."""
        config = load_step_config(config_path, project=process.project, step=step_name)
        return cls(config, host, process, return_path=return_path, debug=debug)

    def cancel(self) -> str:
        return "/uii" + self.return_path

    def finish(self) -> str:
        return "/uii" + self.return_path

    def validate(self) -> None:
        return None

    async def run(self) -> PluginReturnValue:
        """Run the whole extraction for the process.

        Every failure aborts the remaining work and is reported as ERROR.
        Changes already applied to the in-memory document are not rolled back.
        """
        process = self.process
        result = StepResult(status=PluginReturnValue.ERROR, stage="load")
        self.last_result = result

        try:
            document = await self.host.load_document(process)

            result.stage = "images"
            images = order_images(list_images(process.images_directory))
            self.logger.info(f"Found {len(images)} images in {process.images_directory}")

            result.stage = "pagination"
            result.pages_created = synchronize_pagination(document, process.prefs, images)

            result.stage = "extraction"
            result.image = first_image(images)
            lines = await read_image_metadata(self.config.command, result.image, timeout=self.config.timeout)
            if self.debug:
                for line in lines:
                    self.logger.debug(f"{result.image.name}: {line}")

            result.stage = "merge"
            summary = merge_response(lines, self.config, document.logical, process)
            result.metadata_written = summary.metadata_written
            result.properties_written = summary.properties_written

            result.stage = "persistence"
            await self.host.save_document(process, document)
            await self.host.save_process(process)
        except ImageMetadataError as e:
            result.error_message = str(e)
            self.logger.error(f"Image metadata extraction failed for process {process.id} during {result.stage}: {e}")
            return PluginReturnValue.ERROR

        result.stage = "done"
        result.status = PluginReturnValue.FINISH
        self.logger.info(
            f"Process {process.id}: {result.metadata_written} metadata and "
            f"{result.properties_written} properties written from {result.image.name}"
        )
        return PluginReturnValue.FINISH

    async def execute(self, input_data: Any = None) -> bool:
        """Run the step and report whether it did not fail."""
        ret = await self.run()
        return ret != PluginReturnValue.ERROR
