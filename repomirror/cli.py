"""
Command-line interface for repomirror.

Provides commands for restoring mirrors, querying package metadata
and replaying webhook bodies.
"""

import json
import sys
from pathlib import Path

import click

from repomirror import __version__
from repomirror.core.config import Config
from repomirror.core.exceptions import MirrorError
from repomirror.services.registry import default_registry
from repomirror.utils.logging_config import setup_logging


def _fail(ctx, error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get("verbose"):
        import traceback
        traceback.print_exc()
    sys.exit(1)


def _repository(ctx, owner, name):
    return ctx.obj["registry"].create(ctx.obj["service"], owner, name)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Path to log file"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a JSON configuration file"
)
@click.option(
    "--service", "-s",
    default="bitbucket",
    show_default=True,
    help="Repository service to use"
)
@click.pass_context
def cli(ctx, verbose, log_file, config_path, service):
    """
    repomirror

    Keep local mirrors of hosted git repositories and read package
    metadata from them.
    """
    ctx.ensure_object(dict)

    if config_path:
        Config.load_from_file(config_path)
    config = Config.load_from_env()

    verbose = verbose or config.verbose
    ctx.obj["verbose"] = verbose
    ctx.obj["service"] = service
    ctx.obj["registry"] = default_registry(config)

    log_level = "DEBUG" if verbose else "INFO"
    setup_logging(level=log_level, log_file=Path(log_file) if log_file else None)


@cli.command()
@click.argument("owner")
@click.argument("name")
@click.pass_context
def restore(ctx, owner, name):
    """Clone or update the mirror of OWNER/NAME."""
    try:
        repo = _repository(ctx, owner, name)
        repo.restore()
    except MirrorError as e:
        _fail(ctx, e)
    click.echo(f"Mirror ready: {repo.path}")


@cli.command()
@click.argument("owner")
@click.argument("name")
@click.pass_context
def tags(ctx, owner, name):
    """List the tags of OWNER/NAME."""
    try:
        tag_names = _repository(ctx, owner, name).get_tags()
    except MirrorError as e:
        _fail(ctx, e)
    for tag in tag_names:
        click.echo(tag)


@cli.command()
@click.argument("owner")
@click.argument("name")
@click.argument("tag")
@click.pass_context
def manifests(ctx, owner, name, tag):
    """List manifest files of OWNER/NAME at TAG."""
    try:
        files = _repository(ctx, owner, name).get_manifest_files(tag)
    except MirrorError as e:
        _fail(ctx, e)
    for path in files:
        click.echo(path)


@cli.command()
@click.argument("owner")
@click.argument("name")
@click.argument("file")
@click.option(
    "--tag", "-t",
    default=None,
    help="Tag to read from (default: the default branch)"
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Parse the manifest as JSON and pretty-print it"
)
@click.pass_context
def manifest(ctx, owner, name, file, tag, as_json):
    """Print FILE from OWNER/NAME."""
    try:
        content = _repository(ctx, owner, name).get_manifest(tag, file)
    except MirrorError as e:
        _fail(ctx, e)

    if as_json:
        try:
            content = json.dumps(json.loads(content), indent=2)
        except ValueError as e:
            _fail(ctx, e)
    click.echo(content)


@cli.command("release-date")
@click.argument("owner")
@click.argument("name")
@click.argument("tag")
@click.pass_context
def release_date(ctx, owner, name, tag):
    """Print the commit date of TAG in OWNER/NAME."""
    try:
        date = _repository(ctx, owner, name).get_release_date(tag)
    except MirrorError as e:
        _fail(ctx, e)
    click.echo(date.isoformat())


@cli.command("download-url")
@click.argument("owner")
@click.argument("name")
@click.argument("version")
@click.pass_context
def download_url(ctx, owner, name, version):
    """Print the archive URL of VERSION."""
    try:
        url = _repository(ctx, owner, name).download_url(version)
    except MirrorError as e:
        _fail(ctx, e)
    click.echo(url)


@cli.command()
@click.argument("body", type=click.File("rb"), default="-")
@click.option(
    "--no-restore",
    is_flag=True,
    help="Only decode the body, do not touch the mirror"
)
@click.pass_context
def hook(ctx, body, no_restore):
    """
    Handle a raw webhook BODY (file or - for stdin).

    The body is offered to every registered service; the first one that
    understands it restores its mirror.
    """
    repo = ctx.obj["registry"].from_webhook(body.read())
    if repo is None:
        click.echo("Error: webhook body not recognized", err=True)
        sys.exit(1)

    click.echo(json.dumps(repo.descriptor.to_dict(), indent=2))

    if not no_restore:
        try:
            repo.restore()
        except MirrorError as e:
            _fail(ctx, e)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="config.json",
    help="Output path for configuration file"
)
def init(output):
    """
    Initialize configuration file.

    Creates a default configuration file that can be customized.
    """
    Config.save_to_file(output)
    click.echo(f"Configuration saved to: {output}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
