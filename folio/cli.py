"""Command-line interface for Folio.

This module defines the CLI commands using Click framework.

Commands:
- build: Write the listing pages and post index.
- watch: Build, then rebuild whenever a post changes.
- list: Show posts newest first.
- archives: Show posts grouped by year.
- tags: Show tags with post counts.
- new: Create a new post interactively.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .build import BuildError
from .config import ConfigError, load_config
from .utils import slugify, split_tags


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option("-v", "--verbose", is_flag=True, help="Log every file written")
def cli(verbose: bool):
    """Folio blog indexer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option(
    "--page-size",
    type=click.IntRange(min=1),
    required=False,
    help="Posts per listing page (overrides folio.yaml)",
)
def build(drafts: bool, page_size: int | None):
    """Write the listing pages and post index."""
    project_root = Path.cwd()
    from .build import build_index

    with _reported_errors(project_root):
        result = build_index(project_root, include_drafts=drafts, page_size=page_size)
    click.echo(
        f"Indexed {len(result.posts)} posts into {len(result.pages)} listing pages"
    )


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option(
    "--page-size",
    type=click.IntRange(min=1),
    required=False,
    help="Posts per listing page (overrides folio.yaml)",
)
def watch(drafts: bool, page_size: int | None):
    """Build, then rebuild whenever a post changes."""
    project_root = Path.cwd()
    from .watcher import PostWatcher

    with _reported_errors(project_root):
        watcher = PostWatcher(project_root, page_size=page_size)
    watcher.start(include_drafts=drafts)


@cli.command(name="list")
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option("--tag", required=False, help="Only posts with this tag")
def list_posts(drafts: bool, tag: str | None):
    """Show posts newest first."""
    posts = _load(drafts)
    if tag:
        posts = posts.with_tag(tag)
    for post in posts:
        click.echo(f"{post.date.isoformat()}  {post.title}  {post.url}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
def archives(drafts: bool):
    """Show posts grouped by year."""
    for year, posts in _load(drafts).by_year().items():
        click.echo(click.style(str(year), bold=True))
        for post in posts:
            click.echo(f"  {post.date.strftime('%m-%d')}  {post.title}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
def tags(drafts: bool):
    """Show tags with post counts."""
    for tag, count in _load(drafts).tags().most_used():
        click.echo(f"{tag} ({count})")


@cli.command()
def new():
    """Create a new post interactively."""
    project_root = Path.cwd()
    with _reported_errors(project_root):
        config = load_config(project_root)
    posts_dir = project_root / config["posts_dir"]

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    tags_answer = questionary.text(
        "Tags (comma separated):",
        style=_questionary_style(),
    ).ask()
    if tags_answer is None:
        raise click.Abort()

    add_date = questionary.confirm(
        "Prefix filename with today's date? (YYYY-MM-DD-)",
        default=False,
        style=_questionary_style(),
    ).ask()
    if add_date is None:
        raise click.Abort()

    today = date.today()
    slug = slugify(title)
    filename = f"{today.isoformat()}-{slug}.md" if add_date else f"{slug}.md"
    target_path = posts_dir / filename

    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )
    if posts_dir.exists():
        conflicting = [
            f for f in sorted(posts_dir.glob("*.md")) if slugify(f.stem) == slug
        ]
        if conflicting:
            raise click.ClickException(
                f"A post with slug '{slug}' already exists: {conflicting[0].name}"
            )

    posts_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        render_new_post(title, today, split_tags(tags_answer)), encoding="utf-8"
    )
    click.echo(f"Created {target_path.relative_to(project_root)}")


def render_new_post(title: str, day: date, tags: list[str]) -> str:
    """Return the source of a fresh post with its front matter."""
    frontmatter = {"title": title, "date": day, "tags": tags}
    dumped = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    return f"---\n{dumped}---\n\n# {title}\n\n"


def _load(drafts: bool):
    project_root = Path.cwd()
    from .build import load_posts

    with _reported_errors(project_root):
        return load_posts(project_root, include_drafts=drafts)


@contextmanager
def _reported_errors(project_root: Path):
    """Turn build and config errors into user-facing CLI output."""
    try:
        yield
    except BuildError as exc:
        try:
            rel_path = exc.source_path.relative_to(project_root)
        except ValueError:
            rel_path = exc.source_path
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None


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
