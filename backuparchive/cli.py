import io
import logging
from contextlib import contextmanager
from typing import Optional

import click

from . import __version__
from .archive import BaseArchive, BufferArchive, PathArchive
from .backends.base import BaseBackend
from .config import Config
from .exceptions import BackupArchiveError
from .extractor import list_entries
from .metadata import Metadata, format_timestamp
from .utils import archive_checksum, human_size


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug output")
def main(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="  %(message)s",
        handlers=[logging.StreamHandler()],
    )


@main.command()
def info():
    """
    Displays system information
    """
    click.echo(f"backuparchive version {__version__}")
    try:
        config = Config()
    except ValueError:
        click.echo("  No config file found")
        return
    click.echo(f"  Config file: {config.path}\n")
    click.echo("  Backends:")
    for name, backend in config.backends.items():
        click.echo(f"    {name}: {backend}")


## Archive commands


@main.command()
@click.argument("path")
def show(path):
    """
    Prints the metadata of a backup archive ("-" reads it from stdin)
    """
    with archive_errors():
        print_metadata(open_archive(path).metadata())


@main.command()
@click.argument("path")
def contents(path):
    """
    Lists the files inside a backup archive
    """
    output_format = "%-10s %s"
    with archive_errors():
        archive = open_archive(path)
        click.secho(output_format % ("SIZE", "FILENAME"), fg="cyan")
        with archive.open() as stream:
            for member in list_entries(stream):
                size = "dir" if member.isdir() else human_size(member.size)
                click.echo(output_format % (size, member.name))


@main.command()
@click.option(
    "-m", "--meta", type=click.Path(exists=True, dir_okay=False), help="Metadata JSON file"
)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
def verify(path, meta):
    """
    Checks an archive's size and checksum against its metadata

    The metadata recorded when the backup was stored can be supplied with
    --meta; otherwise the copy inside the archive is used.
    """
    with archive_errors():
        if meta:
            with open(meta, "rb") as fh:
                meta = Metadata.from_bytes(fh.read())
        archive = open_archive(path, meta)
        meta = meta or archive.metadata()
        if isinstance(archive, BufferArchive):
            checksum, size = archive_checksum(io.BytesIO(archive.data))
        else:
            with open(archive.filename, "rb") as fh:
                checksum, size = archive_checksum(fh)
    ok = True
    if size != meta.size:
        click.secho(f"Size mismatch: recorded {meta.size}, actual {size}", fg="red")
        ok = False
    if checksum != meta.checksum:
        click.secho(
            f"Checksum mismatch: recorded {meta.checksum}, actual {checksum}",
            fg="red",
        )
        ok = False
    if not ok:
        raise click.ClickException(f"Backup {meta.id} failed verification")
    click.secho(f"Backup {meta.id} verified", fg="green")


# Backend commands


@main.group()
def backend():
    """
    Backend inspection subcommands
    """
    pass


@backend.command()
@click.argument("backend_name")
def archives(backend_name):
    """
    Lists all archives in a backend
    """
    backend = get_backend(backend_name)
    click.secho("ID", fg="cyan")
    with archive_errors():
        for archive_id in sorted(backend.archive_list()):
            click.echo(archive_id)


@backend.command(name="show")
@click.argument("backend_name")
@click.argument("archive_id")
def backend_show(backend_name, archive_id):
    """
    Prints the metadata of an archive stored in a backend
    """
    backend = get_backend(backend_name)
    with archive_errors():
        print_metadata(backend.archive_open(archive_id).metadata())


# Utilities


def print_metadata(meta: Metadata):
    output_format = "%-16s %s"
    rows = [
        ("ID", meta.id),
        ("Checksum", meta.checksum),
        ("Checksum format", meta.checksum_format),
        ("Size", "%s (%i bytes)" % (human_size(meta.size), meta.size)),
        ("Started", format_timestamp(meta.started)),
        ("Finished", format_timestamp(meta.finished)),
        ("Stored", format_timestamp(meta.stored) if meta.stored else "not stored"),
        ("Environment", meta.environment),
        ("Machine", meta.machine),
        ("Hostname", meta.hostname),
        ("Version", meta.version),
        ("Notes", meta.notes),
    ]
    for label, value in rows:
        click.echo(output_format % (label + ":", value))


def open_archive(path: str, meta: Optional[Metadata] = None) -> BaseArchive:
    if path == "-":
        return BufferArchive.from_stream(click.get_binary_stream("stdin"))
    return PathArchive(path, meta)


@contextmanager
def archive_errors():
    try:
        yield
    except BackupArchiveError as e:
        raise click.ClickException(str(e))


def get_backend(backend_name: str) -> BaseBackend:
    try:
        config = Config()
    except ValueError as e:
        raise click.ClickException(str(e))
    try:
        return config.backends[backend_name]
    except KeyError:
        raise click.ClickException(f"No such backend {backend_name}")
