"""Service name and version, resolved from the installed distribution."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["VERSION", "APP_NAME"]

APP_NAME = "RouterProxy"

try:
    VERSION = version("routerproxy")
except PackageNotFoundError:
    # Source checkout without `pip install -e .`
    VERSION = "1.0.0"
