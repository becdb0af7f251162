from typing import List

from ..archive import BaseArchive


class BaseBackend:
    def archive_list(self) -> List[str]:
        """
        Retrieves the set of backup IDs available on this backend.
        """
        raise NotImplementedError()

    def archive_open(self, archive_id: str) -> BaseArchive:
        """
        Returns an accessor for the given backup's archive.
        """
        raise NotImplementedError()
