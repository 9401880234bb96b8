"""dpkgsize — installed package footprint report for Debian-family hosts."""

__version__ = "0.1.0"
