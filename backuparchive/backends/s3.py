import io
import logging
from typing import List, Optional

import boto3
from botocore.exceptions import ClientError

from ..archive import BaseArchive, BufferArchive
from ..exceptions import ArchiveIOError, ArchiveNotFound
from ..utils import ProgressLogger
from .base import BaseBackend


class S3Backend(BaseBackend):
    """
    A backend that reads archives from S3 or compatible.
    """

    archive_suffix = ".tar.gz"

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        bucket: str,
        endpoint: Optional[str] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.bucket = bucket
        self.endpoint = endpoint

    def __repr__(self):
        return f"S3Backend: {self.bucket} ({self.endpoint})"

    def client(self):
        return boto3.resource(
            "s3",
            aws_access_key_id=self.key_id,
            aws_secret_access_key=self.key_secret,
            endpoint_url=self.endpoint,
        ).Bucket(self.bucket)

    def archive_list(self) -> List[str]:
        """
        Returns the set of available archives based on their object keys
        """
        results = []
        for item in self.client().objects.all():
            if item.key.endswith(self.archive_suffix):
                results.append(item.key[: -len(self.archive_suffix)])
        return results

    def archive_open(self, archive_id: str) -> BaseArchive:
        """
        Downloads the archive into memory; nothing is written to disk.
        """
        archive_name = archive_id + self.archive_suffix
        logging.info("Downloading archive %s", archive_name)
        buffer = io.BytesIO()
        try:
            self.client().download_fileobj(
                archive_name, buffer, Callback=ProgressLogger()
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey"):
                raise ArchiveNotFound(
                    f"No archive {archive_id} in bucket {self.bucket}"
                ) from e
            raise ArchiveIOError(f"Cannot download {archive_name}: {e}") from e
        buffer.seek(0)
        return BufferArchive.from_stream(buffer)
