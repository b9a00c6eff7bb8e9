"""Command-line interface for the blog.

Commands:
- build: Build the site into the output directory.
- list: Print the index listing order.
- post: Create a new article interactively.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .utils import format_date, slugify

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="blog")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Build and manage the blog."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft content")
def build(drafts: bool):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(project_root, include_drafts=drafts)
    except BuildError as exc:
        rel_path = exc.source_path.relative_to(project_root)
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


@cli.command(name="list")
@click.option("--drafts", is_flag=True, help="Include draft content")
def list_pages(drafts: bool):
    """Print the pages in index order, newest first."""
    project_root = Path.cwd()
    from .build import load_config, load_pages
    from .listing import listing_entries

    config = load_config(project_root)
    try:
        pages = load_pages(project_root, include_drafts=drafts)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    entries = listing_entries(pages, reverse_ties=bool(config.get("reverse_ties", True)))
    if not entries:
        click.echo("No titled pages.")
        return
    for entry in entries:
        when = format_date(entry.date, config.get("date_format")) or "undated"
        click.echo(f"{when:>20}  {entry.title}  {entry.url or ''}".rstrip())


@cli.command()
def post():
    """Create a new article interactively."""
    posts_dir = Path.cwd() / "site" / "posts"
    if not posts_dir.parent.exists():
        raise click.ClickException(
            "No site/ directory found. Run this command from the blog root."
        )

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()

    description = questionary.text(
        "Description (optional):", style=_questionary_style()
    ).ask()
    if description is None:
        raise click.Abort()

    add_date = questionary.confirm(
        "Date the post today?", default=True, style=_questionary_style()
    ).ask()
    if add_date is None:
        raise click.Abort()

    slug = slugify(title)
    filename = f"{datetime.now():%Y-%m-%d}-{slug}.md" if add_date else f"{slug}.md"
    target = posts_dir / filename
    if any(slugify(p.stem) == slug for p in posts_dir.glob("*.md")):
        raise click.ClickException(f"A post with slug '{slug}' already exists")

    frontmatter = {"title": title.strip()}
    if description.strip():
        frontmatter["description"] = description.strip()
    if add_date:
        frontmatter["date"] = datetime.now().date()

    posts_dir.mkdir(parents=True, exist_ok=True)
    header = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    target.write_text(f"---\n{header}---\n\n", encoding="utf-8")
    click.echo(f"Created {target.relative_to(Path.cwd())}")


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
