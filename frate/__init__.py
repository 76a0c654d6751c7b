"""frate - a local, per-project manager for prebuilt developer tools."""

__version__ = "0.3.0"
