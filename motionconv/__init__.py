"""Strong-motion accelerogram format converter."""

__version__ = "0.1.0"
