"""Image metadata extraction step for digitisation workflows."""

__version__ = "0.1.0"

from imagemeta.config import StepConfiguration, load_step_config
from imagemeta.steps.metadata_step import ImageMetadataExtractionStep, PluginReturnValue

__all__ = [
    "ImageMetadataExtractionStep",
    "PluginReturnValue",
    "StepConfiguration",
    "load_step_config",
]
