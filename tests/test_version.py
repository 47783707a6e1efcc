"""
Tests for the version module of the Pact SDK.
"""
import importlib
import pathlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import patch, mock_open

from pact_sdk import __version__


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_file(mock_open_file, mock_metadata_version):
    """When metadata lookup fails, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    import pact_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import pact_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', lambda name: (_ for _ in ()).throw(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', lambda *args, **kwargs: (_ for _ in ()).throw(FileNotFoundError()))
    import pact_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_key_error(monkeypatch):
    """If TOML exists but missing version key, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', lambda name: (_ for _ in ()).throw(importlib_metadata.PackageNotFoundError()))
    m = mock_open(read_data=b'[project]\nname = "pact-sdk"\n')
    monkeypatch.setattr('pathlib.Path.open', m)
    import pact_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_from_checkout_pyproject():
    """The repository's own pyproject.toml is parsed without any mocking"""
    from pact_sdk.version import PYPROJECT_PATH, version_from_pyproject
    pyproject = pathlib.Path(__file__).parent.parent / "pyproject.toml"
    assert PYPROJECT_PATH.name == "pyproject.toml"
    assert version_from_pyproject(pyproject) == "0.1.0"


def test_version_from_pyproject_on_disk(tmp_path):
    """Real files on disk: a valid version, a missing key, broken TOML and no file"""
    from pact_sdk.version import DEFAULT_VERSION, version_from_pyproject
    good = tmp_path / "good.toml"
    good.write_text('[project]\nname = "pact-sdk"\nversion = "4.5.6"\n')
    no_version = tmp_path / "no_version.toml"
    no_version.write_text('[project]\nname = "pact-sdk"\n')
    broken = tmp_path / "broken.toml"
    broken.write_text('[project\nversion = ')

    assert version_from_pyproject(good) == "4.5.6"
    assert version_from_pyproject(no_version) == DEFAULT_VERSION
    assert version_from_pyproject(broken) == DEFAULT_VERSION
    assert version_from_pyproject(tmp_path / "missing.toml") == DEFAULT_VERSION
