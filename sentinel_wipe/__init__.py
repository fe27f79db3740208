"""Sentinel Wipe - operator console for verified storage erasure."""

try:
    from sentinel_wipe._version import version as __version__
except ImportError:
    __version__ = "0.0.0.dev0"
