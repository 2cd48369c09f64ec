"""
Mappers for projects, units and clients.
"""

from backoffice.domain.models.property import (
    Apartment,
    ApartmentStatus,
    ApartmentType,
    Client,
    Project,
    ProjectStatus,
)
from backoffice.infrastructure.db.models import ApartmentModel, ClientModel, ProjectModel


class ProjectMapper:
    """Maps between Project domain entity and ProjectModel database model."""

    def domain_to_model(self, project: Project) -> ProjectModel:
        return ProjectModel(
            id=project.id,
            project_name=project.project_name,
            location=project.location,
            description=project.description,
            total_apartments=project.total_apartments,
            status=project.status.value,
        )

    def model_to_domain(self, model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            project_name=model.project_name or "",
            location=model.location or "",
            description=model.description or "",
            total_apartments=model.total_apartments or 0,
            status=ProjectStatus(model.status) if model.status else ProjectStatus.ACTIVE,
        )


class ApartmentMapper:
    """Maps between Apartment domain entity and ApartmentModel database model."""

    def domain_to_model(self, apartment: Apartment) -> ApartmentModel:
        return ApartmentModel(
            id=apartment.id,
            project_id=apartment.project_id,
            name=apartment.name,
            type=apartment.type.value,
            floor=apartment.floor,
            surface_m2=apartment.surface_m2,
            status=apartment.status.value,
            price_dh=apartment.price_dh,
            sale_price_dh=apartment.sale_price_dh,
            owner_name=apartment.owner_name,
            description=apartment.description,
            current_contract_id=apartment.current_contract_id,
        )

    def model_to_domain(self, model: ApartmentModel) -> Apartment:
        return Apartment(
            id=model.id,
            project_id=model.project_id,
            name=model.name or "",
            type=ApartmentType(model.type) if model.type else ApartmentType.APARTMENT,
            floor=model.floor,
            surface_m2=model.surface_m2 or 0.0,
            status=ApartmentStatus(model.status) if model.status else ApartmentStatus.AVAILABLE,
            price_dh=model.price_dh or 0.0,
            sale_price_dh=model.sale_price_dh,
            owner_name=model.owner_name or "",
            description=model.description or "",
            current_contract_id=model.current_contract_id,
        )


class ClientMapper:
    """Maps between Client domain entity and ClientModel database model."""

    def domain_to_model(self, client: Client) -> ClientModel:
        return ClientModel(
            id=client.id,
            full_name=client.full_name,
            phone=client.phone,
            email=client.email,
            address=client.address,
            cin_number=client.cin_number,
            occupation=client.occupation,
            contracts=list(client.contracts),
        )

    def model_to_domain(self, model: ClientModel) -> Client:
        return Client(
            id=model.id,
            full_name=model.full_name or "",
            phone=model.phone or "",
            email=model.email or "",
            address=model.address or "",
            cin_number=model.cin_number or "",
            occupation=model.occupation or "",
            contracts=list(model.contracts or []),
        )
