import io
import tarfile
from dataclasses import dataclass
from typing import List, Optional, Union

from .extractor import METADATA_NAME
from .metadata import Metadata
from .utils import tar_adddir, tar_addbytes


@dataclass
class File:
    """
    A file (or directory) to put into a test archive.
    """

    name: str
    content: str = ""
    is_dir: bool = False


def write_files(tar: tarfile.TarFile, files: List[File], prefix: str = "") -> None:
    for file in files:
        name = prefix + file.name
        if file.is_dir:
            tar_adddir(tar, name)
        else:
            tar_addbytes(tar, name, file.content.encode("utf-8"))


def new_archive(
    meta: Optional[Union[Metadata, bytes]],
    files: List[File],
    dump: List[File],
    metadata_name: str = METADATA_NAME,
) -> io.BytesIO:
    """
    Builds a compressed archive in the same layout as a real backup: the
    root files, the database dump under dump/, then the metadata file.

    Passing meta=None leaves the metadata file out; bytes are written as-is.
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        write_files(tar, files)
        if dump:
            tar_adddir(tar, "dump")
            write_files(tar, dump, prefix="dump/")
        if isinstance(meta, Metadata):
            meta = meta.to_bytes()
        if meta is not None:
            tar_addbytes(tar, metadata_name, meta)
    buffer.seek(0)
    return buffer
