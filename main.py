from datetime import datetime
from pathlib import Path
from typing import Annotated, List, Optional

import typer

from config import load_config
from core.linter import PostLinter
from core.logger import log_event
from core.report import summarize, write_report
from core.scaffold import new_post
from utils.front_matter import parse_timestamp

app = typer.Typer(
    name="postlint",
    help="Lint and scaffold blog posts with YAML front matter.",
    no_args_is_help=True,
)


def _load_config_or_exit(config_path: Optional[Path]) -> dict:
    try:
        return load_config(str(config_path) if config_path else None)
    except (FileNotFoundError, ValueError) as err:
        log_event("ERROR", f"Configuration error: {err}")
        typer.echo(f"Configuration error: {err}", err=True)
        raise typer.Exit(code=2)


@app.command()
def lint(
    paths: Annotated[Optional[List[Path]], typer.Argument(help="Post files to lint (default: the whole posts directory)")] = None,
    config_path: Annotated[Optional[Path], typer.Option("--config", help="JSON config file")] = None,
    posts_dir: Annotated[Optional[Path], typer.Option(help="Directory holding the posts")] = None,
    check_links: Annotated[bool, typer.Option("--check-links", help="Check external links in post bodies")] = False,
    report: Annotated[Optional[Path], typer.Option(help="Write all issues to this CSV file")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on warnings too")] = False,
) -> None:
    """Check front matter and filenames of posts."""
    config = _load_config_or_exit(config_path)
    if check_links:
        config["check_links"] = True

    linter = PostLinter(config)
    try:
        if paths:
            result = linter.lint_paths(paths)
        else:
            result = linter.lint_directory(posts_dir)
    except FileNotFoundError as err:
        log_event("ERROR", str(err))
        typer.echo(str(err), err=True)
        raise typer.Exit(code=2)

    for issue in result.issues:
        typer.echo(str(issue))

    report_path = report or config.get("report_path")
    if report_path:
        written = write_report(result.issues, report_path)
        typer.echo(f"Report written to {written}")

    counts = summarize(result.issues)
    typer.echo(
        f"{len(result.posts)} posts checked: "
        f"{counts['errors']} errors, {counts['warnings']} warnings"
    )
    if counts["errors"] or (strict and counts["warnings"]):
        raise typer.Exit(code=1)


@app.command()
def new(
    title: Annotated[str, typer.Argument(help="Post title")],
    author: Annotated[List[str], typer.Option("--author", "-a", help="Author name, repeat for several authors")],
    category: Annotated[Optional[List[str]], typer.Option("--category", "-c", help="Category token, repeatable")] = None,
    date: Annotated[Optional[str], typer.Option(help="Publication timestamp, e.g. '2015-03-18 14:00:00 +0000'")] = None,
    comments: Annotated[Optional[bool], typer.Option("--comments/--no-comments", help="Enable the comments widget")] = None,
    config_path: Annotated[Optional[Path], typer.Option("--config", help="JSON config file")] = None,
    posts_dir: Annotated[Optional[Path], typer.Option(help="Directory holding the posts")] = None,
) -> None:
    """Create a new post file with valid front matter."""
    config = _load_config_or_exit(config_path)
    try:
        published = parse_timestamp(date) if date else datetime.now().astimezone()
        path = new_post(
            posts_dir or config["posts_dir"],
            title,
            author,
            published=published,
            categories=category,
            comments=comments,
            layout=config["layouts"][0],
        )
    except (ValueError, FileExistsError) as err:
        typer.echo(str(err), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Created {path}")


if __name__ == "__main__":
    app()
