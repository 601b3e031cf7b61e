"""cloudmail command line interface."""

from .. import __version__

__cli_name__ = "cloudmail"
