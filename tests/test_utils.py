import base64
import hashlib
import io

from backuparchive.utils import archive_checksum, human_size


def test_human_size():
    assert human_size(10) == "10.0 B"
    assert human_size(2048) == "2.0 KB"


def test_archive_checksum():
    data = b"backup" * 50000
    checksum, size = archive_checksum(io.BytesIO(data), chunk_size=4096)
    assert size == len(data)
    assert checksum == base64.b64encode(hashlib.sha1(data).digest()).decode("ascii")
