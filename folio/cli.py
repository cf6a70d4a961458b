"""Command-line interface for Folio.

This module defines the CLI commands using Click framework.
Every command loads the site from ``--root`` (the current directory by
default) and works through ContentModel.

Commands:
- new: Create and save a new page or collection entry.
- list: List the persisted entries of a collection.
- show: Print an entry as it would be written to disk.
- set: Assign front matter values on an entry and save it.
- destroy: Delete an entry's file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
import questionary
import yaml

from . import __version__
from .errors import FatalError
from .model import ContentModel
from .site import Site


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Project root containing the site configuration",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, root: Path, verbose: bool):
    """Folio content manager."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    ctx.obj = {"root": root}


@cli.command()
@click.argument("label", required=False)
@click.option("--title", help="Title of the new entry")
@click.option("--name", help="Name of the new entry, used for the filename without a title")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Front matter value (parsed as YAML); may be repeated",
)
@click.option("--content", default="", help="Body text of the new entry")
@click.pass_context
def new(
    ctx: click.Context,
    label: str | None,
    title: str | None,
    name: str | None,
    assignments,
    content: str,
):
    """Create a new page or collection entry."""
    with _reporting_errors():
        site = _load_site(ctx)
        if label is None:
            label = questionary.select(
                "Select collection:",
                choices=_labels(site),
                style=_questionary_style(),
            ).ask()
            if label is None:
                raise click.Abort()

        model = ContentModel.new_via_label(label, site)
        if title:
            model.title = title
        if name:
            model.name = name
        for key, value in _parse_assignments(assignments):
            model.set(key, value)
        model.content = content
        model.save()
    click.echo(f"Created {model.wrapped_document.relative_path}")


@cli.command("list")
@click.argument("label")
@click.option("--order-by", help="Attribute to sort by, or use_configured")
@click.option("--asc", "ascending", is_flag=True, help="Sort ascending")
@click.pass_context
def list_entries(ctx: click.Context, label: str, order_by: str | None, ascending: bool):
    """List persisted entries with their ids."""
    with _reporting_errors():
        site = _load_site(ctx)
        models = ContentModel.find_all(
            label,
            site,
            order_by=order_by,
            order_direction="asc" if ascending else None,
        )
    for model in models:
        title = model.fetch("title", "")
        click.echo(f"{model.id}  {model.wrapped_document.relative_path}  {title}")


@cli.command()
@click.argument("label")
@click.argument("id")
@click.pass_context
def show(ctx: click.Context, label: str, id: str):
    """Print an entry as it would be written to disk."""
    with _reporting_errors():
        model = _find_or_fail(_load_site(ctx), label, id)
        output = model.file_output_to_write()
    click.echo(output, nl=False)


@cli.command("set")
@click.argument("label")
@click.argument("id")
@click.argument("assignments", nargs=-1, required=True)
@click.pass_context
def set_values(ctx: click.Context, label: str, id: str, assignments):
    """Assign KEY=VALUE front matter values on an entry and save it."""
    with _reporting_errors():
        model = _find_or_fail(_load_site(ctx), label, id)
        for key, value in _parse_assignments(assignments):
            model.set(key, value)
        model.save()
    click.echo(f"Updated {model.wrapped_document.relative_path}")


@cli.command()
@click.argument("label")
@click.argument("id")
@click.pass_context
def destroy(ctx: click.Context, label: str, id: str):
    """Delete an entry's file."""
    with _reporting_errors():
        model = _find_or_fail(_load_site(ctx), label, id)
        relative_path = model.wrapped_document.relative_path
        if not model.destroy():
            raise click.ClickException(f"Could not delete {relative_path}")
    click.echo(f"Deleted {relative_path}")


def _load_site(ctx: click.Context) -> Site:
    return Site.from_root(ctx.obj["root"])


def _find_or_fail(site: Site, label: str, id: str) -> ContentModel:
    model = ContentModel.find(id, label, site)
    if model is None:
        raise click.ClickException(f"No {label} entry found with id {id}")
    return model


@contextmanager
def _reporting_errors() -> Iterator[None]:
    """Turn FatalError into a styled message and exit status 1."""
    try:
        yield
    except FatalError as exc:
        click.echo(click.style("Error:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None


def _parse_assignments(assignments: Iterable[str]) -> list[tuple[str, Any]]:
    """Parse KEY=VALUE pairs, reading each value as a YAML scalar."""
    parsed = []
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(
                f"Expected KEY=VALUE, got {assignment!r}", param_hint="assignments"
            )
        try:
            value = yaml.safe_load(raw) if raw.strip() else ""
        except yaml.YAMLError:
            value = raw
        parsed.append((key, value))
    return parsed


def _labels(site: Site) -> list[str]:
    """Labels offered by the interactive prompt: pages first, then collections."""
    return ["pages"] + sorted(site.collections)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
