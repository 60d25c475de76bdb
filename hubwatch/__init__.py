"""Game server hub monitor: polls server listings and keeps player history."""

from .app import create_app
from .bootstrap import bootstrap

__all__ = ["create_app", "bootstrap"]
