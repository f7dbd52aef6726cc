"""Terminal dashboard for nxview."""

from .app import NxViewApp

__all__ = ["NxViewApp"]
