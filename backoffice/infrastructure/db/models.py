"""
SQLAlchemy models for the database.
Maps back-office documents to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Date, Float, JSON, Index
)
from sqlalchemy.sql import func

from .database import Base


class ProjectModel(Base):
    """Project table"""
    __tablename__ = 'projects'

    id = Column(String(64), primary_key=True)
    project_name = Column(String(255), nullable=False)
    location = Column(String(255))
    description = Column(Text)
    total_apartments = Column(Integer, default=0)
    status = Column(String(32), default='active')

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class ApartmentModel(Base):
    """Unit table (apartments and garages)"""
    __tablename__ = 'apartments'

    id = Column(String(64), primary_key=True)
    project_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(32), default='apartment')
    floor = Column(String(32))
    surface_m2 = Column(Float, default=0.0)
    status = Column(String(32), default='available')
    price_dh = Column(Float, default=0.0)
    sale_price_dh = Column(Float)
    owner_name = Column(String(255))
    description = Column(Text)
    current_contract_id = Column(String(64))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index('idx_apartments_project', 'project_id'),
        Index('idx_apartments_status', 'status'),
    )


class ClientModel(Base):
    """Client table"""
    __tablename__ = 'clients'

    id = Column(String(64), primary_key=True)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(50))
    email = Column(String(255))
    address = Column(Text)
    cin_number = Column(String(50))
    occupation = Column(String(255))

    # Denormalized list of contract ids
    contracts = Column(JSON, default=list)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class ContractModel(Base):
    """Contract table (leases and sales)"""
    __tablename__ = 'contracts'

    id = Column(String(64), primary_key=True)
    client_id = Column(String(64), nullable=False)
    apartment_id = Column(String(64), nullable=False)
    project_id = Column(String(64))
    type = Column(String(16), nullable=False)
    amount_dh = Column(Float, nullable=False, default=0.0)
    start_date = Column(Date, nullable=False)
    status = Column(String(32), nullable=False, default='active')
    notes = Column(Text)

    # Rental terms
    duration_months = Column(Integer)
    end_date = Column(Date)
    months_left = Column(Integer)
    previous_contract_id = Column(String(64))
    renewed_contract_id = Column(String(64))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index('idx_contracts_client', 'client_id'),
        Index('idx_contracts_apartment', 'apartment_id'),
        Index('idx_contracts_status', 'status'),
    )


class PaymentModel(Base):
    """Payment table"""
    __tablename__ = 'payments'

    id = Column(String(64), primary_key=True)
    contract_id = Column(String(64), nullable=False)
    client_id = Column(String(64))
    amount_dh = Column(Float, nullable=False)
    payment_date = Column(Date)
    payment_for = Column(String(255), nullable=False)
    status = Column(String(16), nullable=False, default='paid')
    payment_method = Column(String(16), default='especes')

    # Method details
    cheque_number = Column(String(64))
    bank_name = Column(String(255))
    transfer_series = Column(String(64))
    effect_number = Column(String(64))
    receipt_url = Column(String(500))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_payments_contract', 'contract_id'),
        Index('idx_payments_date', 'payment_date'),
    )


# Create tables if they don't exist (for development)
def create_all_tables(engine):
    """Create all tables in the database"""
    Base.metadata.create_all(bind=engine)
