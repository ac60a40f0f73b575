"""Call of the external image metadata tool."""

import asyncio
import contextlib
from pathlib import Path
from typing import Optional, Sequence, Union

from imagemeta.exceptions import ExtractionToolError, NoImagesError
from imagemeta.logging import get_logger

logger = get_logger("extraction.command")


def first_image(images: Sequence[Path]) -> Path:
    """Image whose metadata is read for the whole process."""
    if not images:
        raise NoImagesError("No images found to read metadata from")
    return images[0]


async def read_image_metadata(
    command: str, image: Union[str, Path], timeout: Optional[float] = None
) -> list[str]:
    """Run `command image` and return its standard output as lines.

    The whole output is read before returning. Standard error is discarded.
    The child process is killed and reaped if it does not finish, including on
    timeout and cancellation.

    Args:
        command: Executable to run.
        image: Single argument passed to the executable.
        timeout: Seconds to wait for the tool, or None to wait forever.

    Returns:
        Output lines in emission order, without line endings.

    Raises:
        ExtractionToolError: If the tool cannot be started, times out or exits
            with a non-zero code.
    """
    logger.debug(f"Running {command} {image}")
    try:
        proc = await asyncio.create_subprocess_exec(
            command,
            str(image),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        raise ExtractionToolError(command, f"cannot start: {e}") from e

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        raise ExtractionToolError(command, f"no result after {timeout} seconds") from None
    finally:
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()

    if proc.returncode != 0:
        raise ExtractionToolError(command, f"exited with code {proc.returncode}", proc.returncode)

    lines = stdout.decode("utf-8", errors="replace").splitlines()
    logger.debug(f"{command} returned {len(lines)} lines for {Path(image).name}")
    return lines
