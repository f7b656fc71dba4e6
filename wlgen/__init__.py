"""wlgen - Go binding generator for wayland-style protocol descriptions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wlgen")
except PackageNotFoundError:
    __version__ = "(local)"
