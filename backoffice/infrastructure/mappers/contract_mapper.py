"""
Contract mapper for converting between domain entities and database models.
"""

from backoffice.domain.models.contract import Contract, ContractStatus, ContractType
from backoffice.infrastructure.db.models import ContractModel


class ContractMapper:
    """Maps between Contract domain entity and ContractModel database model."""

    def domain_to_model(self, contract: Contract) -> ContractModel:
        """Convert Contract domain entity to ContractModel."""
        return ContractModel(
            id=contract.id,
            client_id=contract.client_id,
            apartment_id=contract.apartment_id,
            project_id=contract.project_id,
            type=contract.type.value,
            amount_dh=contract.amount_dh,
            start_date=contract.start_date,
            status=contract.status.value,
            notes=contract.notes,
            duration_months=contract.duration_months,
            end_date=contract.end_date,
            months_left=contract.months_left,
            previous_contract_id=contract.previous_contract_id,
            renewed_contract_id=contract.renewed_contract_id,
            created_at=contract.created_at,
            updated_at=contract.updated_at,
        )

    def model_to_domain(self, model: ContractModel) -> Contract:
        """Convert ContractModel to Contract domain entity."""
        contract = Contract(
            id=model.id,
            client_id=model.client_id,
            apartment_id=model.apartment_id,
            project_id=model.project_id or "",
            type=ContractType(model.type),
            amount_dh=model.amount_dh or 0.0,
            start_date=model.start_date,
            status=ContractStatus(model.status) if model.status else ContractStatus.ACTIVE,
            notes=model.notes or "",
            duration_months=model.duration_months,
            end_date=model.end_date,
            months_left=model.months_left,
            previous_contract_id=model.previous_contract_id,
            renewed_contract_id=model.renewed_contract_id,
        )
        if model.created_at:
            contract.created_at = model.created_at
        if model.updated_at:
            contract.updated_at = model.updated_at
        return contract
