#!/usr/bin/env python3
"""
Database management script for the property back office.
Handles table creation, reset and demo seeding.
"""

import sys
from datetime import date

from backoffice.domain.calendar import add_months, month_label, month_start, today_utc
from backoffice.domain.models.contract import Contract
from backoffice.domain.models.payment import Payment, rent_payment_label
from backoffice.domain.models.property import (
    Apartment,
    ApartmentStatus,
    ApartmentType,
    Client,
    Project,
)
from backoffice.domain.services.lifecycle_service import LifecycleService
from backoffice.infrastructure.db.database import Base, SessionLocal, engine
from backoffice.infrastructure.db.models import create_all_tables
from backoffice.infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository


def create_tables():
    print("Creating tables...")
    create_all_tables(engine)


def reset_database():
    """Reset database - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        print("Resetting database...")
        Base.metadata.drop_all(bind=engine)
        create_all_tables(engine)
    else:
        print("Database reset cancelled.")


def seed_demo_data(as_of: date):
    """Insert one project with a running lease, an overdue lease and a sale in progress."""
    create_all_tables(engine)
    session = SessionLocal()
    try:
        repository = SQLAlchemyDocumentRepository(session)
        lifecycle = LifecycleService()

        project = repository.add_project(Project(
            project_name="Résidence Al Amal", location="Casablanca", total_apartments=4
        ))
        units = [
            repository.add_apartment(Apartment(
                project_id=project.id, name=name, price_dh=price, sale_price_dh=sale_price,
                type=ApartmentType.GARAGE if name.startswith("G") else ApartmentType.APARTMENT,
            ))
            for name, price, sale_price in [
                ("A1", 4500.0, None),
                ("A2", 5000.0, None),
                ("B1", 0.0, 950000.0),
                ("G1", 600.0, None),
            ]
        ]
        repository.add_apartment(Apartment(
            project_id=project.id, name="B2", status=ApartmentStatus.MAINTENANCE
        ))
        clients = [
            repository.add_client(Client(full_name=name, phone=phone))
            for name, phone in [
                ("Youssef Benali", "0600000001"),
                ("Élodie Martin", "0600000002"),
                ("Karim Alaoui", "0600000003"),
            ]
        ]

        start = add_months(month_start(as_of), -3)
        up_to_date = Contract.create_rental(
            clients[0].id, units[0].id, project.id, 4500.0, start, 12
        )
        behind = Contract.create_rental(
            clients[1].id, units[1].id, project.id, 5000.0, start, 12
        )
        sale = Contract.create_sale(
            clients[2].id, units[2].id, project.id, 950000.0, start
        )
        for contract in (up_to_date, behind, sale):
            repository.apply_plan(lifecycle.plan_create_contract(contract).plan)

        for month in range(4):
            due = add_months(start, month)
            repository.add_payment(Payment(
                contract_id=up_to_date.id, client_id=clients[0].id, amount_dh=4500.0,
                payment_date=due, payment_for=rent_payment_label(month_label(due)),
            ))
        repository.add_payment(Payment(
            contract_id=behind.id, client_id=clients[1].id, amount_dh=5000.0,
            payment_date=start, payment_for=rent_payment_label(month_label(start)),
        ))
        repository.add_payment(Payment(
            contract_id=sale.id, client_id=clients[2].id, amount_dh=300000.0,
            payment_date=start, payment_for="Versement 1 - Vente B1",
        ))
        print(f"Seeded project {project.id} with 3 contracts")
    finally:
        session.close()


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create         - Create missing tables")
        print("  reset          - Reset database (WARNING: drops all data)")
        print("  seed           - Insert demo data")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        create_tables()
    elif command_name == "reset":
        reset_database()
    elif command_name == "seed":
        seed_demo_data(today_utc())
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
