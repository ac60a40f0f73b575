from abc import ABC, abstractmethod
from typing import Any, Optional

from imagemeta.logging import get_logger


class PipelineStep(ABC):
    """abstract base class for all workflow steps."""

    def __init__(self, config: Any, name: Optional[str] = None, debug: bool = False):
        """initialize the step.

        Args:
            config: Configuration specific to the step.
            name: Optional name for the step (used for logging).
            debug: Log intermediate data of the step at debug level.
        """
        self.config = config
        self.debug = debug
        self.logger = get_logger(name or self.__class__.__name__)

    @abstractmethod
    async def execute(self, input_data: Any = None) -> Any:
        """Execute the step.

        Args:
            input_data: Input data to process.

        Returns:
            Processed data or result of the step.
        """
        pass

    async def __call__(self, input_data: Any = None) -> Any:
        """shortway of calling `execute` method."""
        return await self.execute(input_data)
