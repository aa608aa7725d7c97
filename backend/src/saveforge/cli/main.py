"""SaveForge CLI entry point."""

import logging

import click


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (defaults to SAVEFORGE_LOG_LEVEL or WARNING).",
)
def cli(log_level: str | None):
    """SaveForge entity save lifecycle CLI."""
    from saveforge.config import Settings

    level = (log_level or Settings.from_env().log_level).upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# Register subcommand groups
from saveforge.cli.metadata_cmd import metadata  # noqa: E402

cli.add_command(metadata)
