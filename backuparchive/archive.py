import gzip
import io
import logging
import threading
from typing import BinaryIO, Optional

from .exceptions import ArchiveFormatError, ArchiveIOError, ArchiveNotFound
from .extractor import extract_metadata, format_errors
from .metadata import Metadata


class ArchiveStream(gzip.GzipFile):
    """
    The decompressed contents of an archive.

    Reads raise ArchiveFormatError rather than the assorted gzip and zlib
    errors when the compressed data turns out to be corrupt.
    """

    def read(self, size=-1):
        with format_errors():
            return super().read(size)

    def read1(self, size=-1):
        with format_errors():
            return super().read1(size)

    def peek(self, n):
        with format_errors():
            return super().peek(n)

    def readline(self, size=-1):
        with format_errors():
            return super().readline(size)


def _checked(stream: ArchiveStream) -> ArchiveStream:
    """
    Reads ahead far enough to validate the gzip header, closing the stream
    if it is not valid.
    """
    try:
        # gzip treats a source with no member at all as empty content
        if not stream.peek(1) and stream.fileobj.tell() == 0:
            raise ArchiveFormatError("archive is empty, not gzip data")
    except BaseException:
        stream.close()
        raise
    return stream


class MetadataCache:
    """
    Holds a metadata record once one has been extracted. The value can only
    go from absent to present; the first record stored is kept.
    """

    def __init__(self):
        self._value: Optional[Metadata] = None
        self._lock = threading.Lock()

    def get(self) -> Optional[Metadata]:
        return self._value

    def set(self, value: Metadata) -> Metadata:
        with self._lock:
            if self._value is None:
                self._value = value
            return self._value


class BaseArchive:
    """
    Read access to a compressed backup archive.
    """

    filename = ""

    def open(self) -> ArchiveStream:
        """
        Returns a new stream over the decompressed archive contents. Every
        call returns an independent stream which the caller must close.
        """
        raise NotImplementedError()

    def metadata(self) -> Metadata:
        """
        Returns the metadata record stored inside the archive.
        """
        raise NotImplementedError()

    def _extract(self, cache: MetadataCache) -> Metadata:
        cached = cache.get()
        if cached is not None:
            return cached
        logging.info("Extracting metadata from %r", self)
        with self.open() as stream:
            return cache.set(extract_metadata(stream))


class PathArchive(BaseArchive):
    """
    An archive stored as a file on disk. The file is reopened on every
    open() call; no handle is kept between calls.

    If the metadata is already known (for example from a side-car file),
    pass it in and the archive will never be scanned for it.
    """

    def __init__(self, filename: str, metadata: Optional[Metadata] = None):
        self.filename = filename
        self.metadata_override = metadata
        self.cache = MetadataCache()

    def __repr__(self):
        return f"PathArchive({self.filename!r})"

    def open(self) -> ArchiveStream:
        logging.debug("Opening archive %s", self.filename)
        try:
            # The GzipFile owns the file handle and closes it with itself
            stream = ArchiveStream(filename=self.filename, mode="rb")
        except FileNotFoundError as e:
            raise ArchiveNotFound(e.errno, e.strerror, self.filename) from e
        except OSError as e:
            raise ArchiveIOError(e.errno, e.strerror, self.filename) from e
        return _checked(stream)

    def metadata(self) -> Metadata:
        if self.metadata_override is not None:
            return self.metadata_override
        return self._extract(self.cache)


class BufferArchive(BaseArchive):
    """
    An archive held in memory as its compressed bytes.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.cache = MetadataCache()

    @classmethod
    def from_stream(cls, fileobj: BinaryIO) -> "BufferArchive":
        """
        Reads the whole of the stream into memory. The stream is not kept.
        """
        try:
            data = fileobj.read()
        except OSError as e:
            raise ArchiveIOError(f"Cannot read archive: {e}") from e
        return cls(data)

    def __repr__(self):
        return f"BufferArchive(<{len(self.data)} bytes>)"

    def open(self) -> ArchiveStream:
        return _checked(ArchiveStream(fileobj=io.BytesIO(self.data), mode="rb"))

    def metadata(self) -> Metadata:
        return self._extract(self.cache)
