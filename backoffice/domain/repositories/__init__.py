"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .document_repository import DocumentRepository, Plan

__all__ = [
    "DocumentRepository",
    "Plan",
]
