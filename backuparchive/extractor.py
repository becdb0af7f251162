import gzip
import logging
import tarfile
import zlib
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from .exceptions import ArchiveFormatError, BackupArchiveError, MetadataNotFound
from .metadata import Metadata

# Name of the metadata entry at the root of every backup archive
METADATA_NAME = "metadata.json"


@contextmanager
def format_errors(what: str = "archive"):
    """
    Turns the low-level errors raised by corrupt gzip or tar data into
    ArchiveFormatError.
    """
    try:
        yield
    except BackupArchiveError:
        raise
    except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
        raise ArchiveFormatError("corrupt %s: %s" % (what, e)) from e


class StrictTarInfo(tarfile.TarInfo):
    """
    A TarInfo that treats a bad or cut-off header anywhere in the stream as
    corruption. Plain tarfile only does so for the first header and
    otherwise stops reading as if the archive had ended.
    """

    @classmethod
    def frombuf(cls, buf, encoding, errors):
        try:
            return super().frombuf(buf, encoding, errors)
        except (tarfile.InvalidHeaderError, tarfile.TruncatedHeaderError) as e:
            raise tarfile.ReadError("bad entry header: %s" % e) from e


def iter_tar(stream: BinaryIO) -> tarfile.TarFile:
    """
    Opens the decompressed stream as a tar, reading it strictly forwards.
    """
    return tarfile.open(fileobj=stream, mode="r|", tarinfo=StrictTarInfo)


def list_entries(stream: BinaryIO) -> Iterator[tarfile.TarInfo]:
    """
    Yields the header of every entry in the archive, in archive order.
    """
    with format_errors():
        with iter_tar(stream) as tar:
            for member in tar:
                yield member


def extract_metadata(stream: BinaryIO, name: str = METADATA_NAME) -> Metadata:
    """
    Scans a decompressed archive stream for the metadata entry and parses it.

    Entries before the metadata are skipped over; scanning stops as soon as
    it is found, so the rest of the stream is left unread.
    """
    raw = None
    with format_errors():
        with iter_tar(stream) as tar:
            for member in tar:
                if member.name == name and member.isfile():
                    logging.debug("Found %s (%i bytes)", name, member.size)
                    raw = tar.extractfile(member).read()
                    break
    if raw is None:
        raise MetadataNotFound("archive has no %s entry" % name)
    return Metadata.from_bytes(raw)
