"""Personal finance tracker: transaction API and client library."""

from .config import VERSION as __version__
