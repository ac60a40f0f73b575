"""Command line interface for running the step outside the workflow host."""

import asyncio
import sys
from typing import Optional

import click
import yaml

from imagemeta import __version__
from imagemeta.config import WILDCARD, load_step_config
from imagemeta.exceptions import ImageMetadataError
from imagemeta.host.local import LocalHost, load_process
from imagemeta.logging import add_log_file, enable_error_log, get_logger, set_log_level
from imagemeta.model.prefs import load_prefs
from imagemeta.steps.metadata_step import ImageMetadataExtractionStep

logger = get_logger("pipeline")


@click.group()
@click.version_option(version=__version__, prog_name="imagemeta")
def main():
    """Image metadata extraction step for digitisation workflows."""


@main.command()
@click.option("--process-file", "-p", required=True, type=click.Path(exists=True, dir_okay=False), help="Process JSON file")
@click.option("--config", "-c", "config_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Plugin configuration file (YAML/JSON)")
@click.option("--ruleset", "-r", required=True, type=click.Path(exists=True, dir_okay=False), help="Ruleset YAML with the known types")
@click.option("--step", "-s", "step_name", default=WILDCARD, show_default=True, help="Workflow step name used to select the configuration block")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write the log to this file")
@click.option("--error-log-dir", type=click.Path(file_okay=False), help="Directory for daily error logs")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def run(
    process_file: str,
    config_path: str,
    ruleset: str,
    step_name: str,
    log_file: Optional[str],
    error_log_dir: Optional[str],
    debug: bool,
):
    """Run the extraction for one process."""
    if debug:
        set_log_level("DEBUG")
    if log_file:
        add_log_file(log_file, level="DEBUG" if debug else "INFO")
    if error_log_dir:
        enable_error_log(error_log_dir)

    try:
        prefs = load_prefs(ruleset)
        process = load_process(process_file, prefs)
        step = ImageMetadataExtractionStep.from_config_file(
            config_path, LocalHost(process_file=process_file), process, step_name=step_name, debug=debug
        )
    except ImageMetadataError as e:
        logger.error(f"Cannot prepare the step: {e}")
        sys.exit(1)

    ok = asyncio.run(step())
    click.echo(step.last_result.status.value)
    sys.exit(0 if ok else 1)


@main.command("show-config")
@click.option("--config", "-c", "config_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Plugin configuration file (YAML/JSON)")
@click.option("--project", default=WILDCARD, show_default=True, help="Project name")
@click.option("--step", "-s", "step_name", default=WILDCARD, show_default=True, help="Workflow step name")
def show_config(config_path: str, project: str, step_name: str):
    """Print the configuration that applies to a project and step."""
    try:
        config = load_step_config(config_path, project=project, step=step_name)
    except ImageMetadataError as e:
        raise click.ClickException(str(e))

    click.echo(yaml.safe_dump(
        {
            "command": config.command,
            "propertyContainer": config.property_container,
            "timeout": config.timeout,
            "metadata": config.line_to_metadata_field,
            "properties": config.line_to_property_name,
        },
        sort_keys=False,
        allow_unicode=True,
    ))


if __name__ == "__main__":
    main()
