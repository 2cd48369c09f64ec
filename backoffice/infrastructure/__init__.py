"""
Infrastructure layer for the property back office.

This layer contains the implementation details behind the domain ports:
the SQLAlchemy document store and the FastAPI web surface.
"""
