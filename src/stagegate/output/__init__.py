"""Output helpers for stage gate runs."""

from .audit import AuditLogger

__all__ = ["AuditLogger"]
