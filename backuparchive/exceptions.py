class BackupArchiveError(Exception):
    """
    Base class for all errors raised while reading a backup archive.
    """


class ArchiveNotFound(BackupArchiveError, FileNotFoundError):
    """
    The archive file does not exist.
    """


class ArchiveIOError(BackupArchiveError, OSError):
    """
    Reading the archive source failed.
    """


class ArchiveFormatError(BackupArchiveError):
    """
    The archive is not valid gzip, or its tar framing is corrupt.
    """


class ExtractionError(BackupArchiveError):
    """
    The archive could not be searched for its metadata.
    """


class MetadataNotFound(ExtractionError):
    """
    The archive has no metadata entry.
    """


class MetadataParseError(BackupArchiveError, ValueError):
    """
    The metadata entry exists but is not a valid metadata record.
    """
