"""Metadata CLI commands: validate and show hook chains."""

import importlib
from pathlib import Path

import click

from saveforge.config import Settings
from saveforge.hooks import VALID_HOOK_POINTS, HookRegistry
from saveforge.metadata.loader import MetadataLoader


def _load(metadata_path: Path | None) -> MetadataLoader:
    """Load metadata from the given path or the configured default."""
    path = metadata_path or Settings.from_env().metadata_path
    if not path.exists():
        click.echo(f"Error: Metadata directory not found at {path}", err=True)
        raise SystemExit(1)

    loader = MetadataLoader(path)
    try:
        loader.load_all()
    except (ValueError, KeyError) as e:
        click.echo(click.style(f"Metadata validation failed: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


path_option = click.option(
    "--path",
    "metadata_path",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Metadata directory (defaults to SAVEFORGE_METADATA_PATH or ./metadata).",
)


@click.group()
def metadata():
    """Metadata commands."""
    pass


@metadata.command()
@path_option
def validate(metadata_path: Path | None):
    """Load entity metadata and report what was found."""
    loader = _load(metadata_path)

    entities = loader.list_entities()
    click.echo(f"Loaded {len(entities)} entities:")
    for name in sorted(entities):
        entity = loader.get_entity(name)
        hook_count = sum(len(configs) for configs in entity.hooks.values())
        parts = [f"{len(entity.fields)} fields", f"{hook_count} hooks"]
        if entity.extends:
            parts.append(f"extends {entity.extends}")
        if entity.abstract:
            parts.append("abstract")
        click.echo(f"  ✓ {name} ({', '.join(parts)})")

    click.echo(click.style("\nAll metadata is valid.", fg="green", bold=True))


@metadata.command("hooks")
@click.argument("entity_name")
@path_option
@click.option(
    "--import",
    "modules",
    multiple=True,
    help="Module that registers hooks (e.g. myapp.hooks); may be repeated.",
)
def hooks_cmd(entity_name: str, metadata_path: Path | None, modules: tuple[str, ...]):
    """Show the resolved hook chain for ENTITY_NAME, in execution order."""
    for module in modules:
        importlib.import_module(module)
    loader = _load(metadata_path)

    entity = loader.get_entity(entity_name)
    if entity is None:
        click.echo(f"Error: Unknown entity '{entity_name}'", err=True)
        raise SystemExit(1)

    click.echo(f"{entity.name}:")
    for point in VALID_HOOK_POINTS:
        configs = entity.hooks.get(point, [])
        click.echo(f"  {point}:")
        if not configs:
            click.echo("    (none)")
            continue
        for config in configs:
            modes = ", ".join(config.on)
            line = f"    - {config.name} [{modes}]"
            if not HookRegistry.is_registered(config.name):
                line = click.style(line + " (not registered)", fg="yellow")
            click.echo(line)
