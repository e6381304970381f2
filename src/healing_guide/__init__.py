"""healing-guide: resolve described symptoms into healing guides."""

__version__ = "0.1.0"
