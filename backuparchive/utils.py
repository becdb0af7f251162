import base64
import hashlib
import io
import logging
import tarfile
from typing import BinaryIO, Tuple


def human_size(num, suffix="B"):
    """
    Given a size in bytes, returns the human-readable version.
    """
    for unit in ["", "K", "M", "G", "T", "P", "E", "Z"]:
        if abs(num) < 1024.0:
            return "%3.1f %s%s" % (num, unit, suffix)
        num /= 1024.0
    return "%.1f%s%s" % (num, "Y", suffix)


def normalize_tarinfo(tarinfo: tarfile.TarInfo) -> tarfile.TarInfo:
    """
    Filter function for adding things to tarfiles consistently.
    """
    tarinfo.uid = tarinfo.gid = 0
    tarinfo.uname = tarinfo.gname = "root"
    tarinfo.mode = 0o755 if tarinfo.isdir() else 0o644
    tarinfo.mtime = int(tarinfo.mtime)
    return tarinfo


def tar_addbytes(tar: tarfile.TarFile, name: str, data: bytes) -> None:
    """
    Adds the given bytes to the tarfile as a file
    """
    tarinfo = tarfile.TarInfo(name)
    tarinfo.size = len(data)
    normalize_tarinfo(tarinfo)
    tar.addfile(tarinfo, io.BytesIO(data))


def tar_adddir(tar: tarfile.TarFile, name: str) -> None:
    """
    Adds an empty directory entry to the tarfile
    """
    tarinfo = tarfile.TarInfo(name)
    tarinfo.type = tarfile.DIRTYPE
    normalize_tarinfo(tarinfo)
    tar.addfile(tarinfo)


def archive_checksum(fileobj: BinaryIO, chunk_size=64 * 1024) -> Tuple[str, int]:
    """
    Returns the checksum backups record for a compressed archive, as
    (SHA-1 base64 encoded, size in bytes).
    """
    sha1 = hashlib.sha1()
    size = 0
    progress = ProgressLogger()
    while True:
        chunk = fileobj.read(chunk_size)
        if not chunk:
            break
        sha1.update(chunk)
        size += len(chunk)
        progress(len(chunk))
    return base64.b64encode(sha1.digest()).decode("ascii"), size


class ProgressLogger:
    def __init__(self):
        self.seen = 0

    def __call__(self, chunk_size):
        old_seen_gigs = self.seen // ((1024**3) * 5)
        self.seen += chunk_size
        new_seen_gigs = self.seen // ((1024**3) * 5)
        if old_seen_gigs != new_seen_gigs:
            logging.info(f"  {new_seen_gigs * 5}GB")
