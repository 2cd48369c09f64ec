"""
Infrastructure repositories module.
Contains SQLAlchemy implementations of domain repositories.
"""

from .document_repository import SQLAlchemyDocumentRepository

__all__ = [
    "SQLAlchemyDocumentRepository",
]
