"""
Infrastructure mappers module.
Contains mappers for converting between domain entities and database models.
"""

from .contract_mapper import ContractMapper
from .payment_mapper import PaymentMapper
from .property_mapper import ApartmentMapper, ClientMapper, ProjectMapper

__all__ = [
    "ContractMapper",
    "PaymentMapper",
    "ApartmentMapper",
    "ClientMapper",
    "ProjectMapper",
]
