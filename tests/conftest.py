import gzip

import pytest

from backuparchive.metadata import Metadata
from backuparchive.testing import File, new_archive

META_JSON = (
    b"{"
    b'"ID":"20140909-115934.asdf-zxcv-qwe",'
    b'"Checksum":"123af2cef",'
    b'"ChecksumFormat":"SHA-1, base64 encoded",'
    b'"Size":10,'
    b'"Stored":"0001-01-01T00:00:00Z",'
    b'"Started":"2014-09-09T11:59:34Z",'
    b'"Finished":"2014-09-09T12:00:34Z",'
    b'"Notes":"",'
    b'"Environment":"asdf-zxcv-qwe",'
    b'"Machine":"0",'
    b'"Hostname":"myhost",'
    b'"Version":"1.21-alpha3"'
    b"}\n"
)

FILES = [
    File("var/lib/juju/tools/1.21-alpha2.1-trusty-amd64/jujud", "<some binary data goes here>"),
    File("var/lib/juju/system-identity", "<an ssh key goes here>"),
]

DUMP = [
    File("juju", is_dir=True),
    File("juju/machines.bson", "<BSON data goes here>"),
    File("oplog.bson", "<BSON data goes here>"),
]


@pytest.fixture
def meta():
    return Metadata.from_bytes(META_JSON)


@pytest.fixture
def compressed():
    """
    The archive as it would be written to disk.
    """
    return new_archive(META_JSON, FILES, DUMP).getvalue()


@pytest.fixture
def data(compressed):
    """
    The decompressed archive contents.
    """
    return gzip.decompress(compressed)


@pytest.fixture
def archive_path(tmp_path, compressed):
    path = tmp_path / "juju-backup.tgz"
    path.write_bytes(compressed)
    return str(path)
