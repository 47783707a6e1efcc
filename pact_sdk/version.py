"""
Version information for the Pact SDK.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION_NAME = "pact-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).parent.parent / "pyproject.toml"


def version_from_pyproject(path: pathlib.Path = PYPROJECT_PATH) -> str:
    """
    Read ``project.version`` from a pyproject.toml.

    Used for source checkouts where the distribution is not installed.
    Returns DEFAULT_VERSION if the file is missing or has no version.
    """
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


try:
    __version__ = importlib.metadata.version(DISTRIBUTION_NAME)
except importlib.metadata.PackageNotFoundError:
    __version__ = version_from_pyproject()
