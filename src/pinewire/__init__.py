"""Top-level package for :mod:`pinewire`.

The package exposes version metadata and the client entry point so
applications can depend on ``pinewire.PineconeClient`` directly.
"""

from importlib import metadata

from pinewire.client import PineconeClient

try:
    __version__ = metadata.version("pinewire")
except metadata.PackageNotFoundError:  # pragma: no cover - source checkouts
    __version__ = "0.0.0"

__all__ = ["PineconeClient", "__version__"]
