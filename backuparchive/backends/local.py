import logging
import os
from typing import List

from ..archive import BaseArchive, PathArchive
from ..exceptions import ArchiveNotFound
from ..metadata import Metadata
from .base import BaseBackend


class LocalBackend(BaseBackend):
    """
    A backend that reads archives from a local folder.

    Archives are named <id>.tar.gz; a <id>.meta.json file next to one is
    used as its metadata instead of scanning the archive.
    """

    archive_suffix = ".tar.gz"
    meta_suffix = ".meta.json"

    def __init__(self, path):
        self.path = path

    def __repr__(self):
        return f"LocalBackend: {self.path}"

    def archive_list(self) -> List[str]:
        """
        Returns the set of available archives based on their filenames
        """
        result = []
        for filename in os.listdir(self.path):
            if filename.endswith(self.archive_suffix):
                result.append(filename[: -len(self.archive_suffix)])
        return result

    def archive_open(self, archive_id: str) -> BaseArchive:
        archive_path = os.path.join(self.path, archive_id + self.archive_suffix)
        meta_path = os.path.join(self.path, archive_id + self.meta_suffix)
        if not os.path.isfile(archive_path):
            raise ArchiveNotFound(f"No archive {archive_id} in {self.path}")
        meta = None
        if os.path.isfile(meta_path):
            logging.info("Using metadata from %s", meta_path)
            with open(meta_path, "rb") as file:
                meta = Metadata.from_bytes(file.read())
        return PathArchive(archive_path, meta)
