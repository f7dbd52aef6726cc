"""nxview - Nx workspace project tree."""

__version__ = "0.1.0"
