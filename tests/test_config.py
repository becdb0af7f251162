import pytest

from backuparchive.backends.local import LocalBackend
from backuparchive.config import Config


def test_backends(tmp_path):
    path = tmp_path / "config"
    path.write_text(
        "[backend.local]\n"
        "class = backuparchive.backends.local.LocalBackend\n"
        "path = %s\n" % tmp_path
    )
    config = Config([str(path)])
    assert config.path == str(path)
    assert isinstance(config.backends["local"], LocalBackend)
    assert config.backends["local"].path == str(tmp_path)


def test_first_existing_path_wins(tmp_path):
    second = tmp_path / "second"
    second.write_text("[backend.other]\nclass = backuparchive.backends.local.LocalBackend\npath = /\n")
    config = Config([str(tmp_path / "first"), str(second)])
    assert list(config.backends) == ["other"]


def test_missing_class(tmp_path):
    path = tmp_path / "config"
    path.write_text("[backend.broken]\npath = /\n")
    with pytest.raises(ValueError):
        Config([str(path)])


def test_no_config(tmp_path):
    with pytest.raises(ValueError):
        Config([str(tmp_path / "nothing")])


def test_undotted_class(tmp_path):
    path = tmp_path / "config"
    path.write_text("[backend.broken]\nclass = LocalBackend\npath = /\n")
    with pytest.raises(ValueError) as excinfo:
        Config([str(path)])
    assert "backend.broken" in str(excinfo.value)
