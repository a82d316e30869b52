"""Sequencing read records."""

from .models import READ_CHECKER, Read

__all__ = ["READ_CHECKER", "Read"]
