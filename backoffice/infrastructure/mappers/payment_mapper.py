"""
Payment mapper for converting between domain entities and database models.
"""

from backoffice.domain.models.payment import Payment, PaymentMethod, PaymentStatus
from backoffice.infrastructure.db.models import PaymentModel


class PaymentMapper:
    """Maps between Payment domain entity and PaymentModel database model."""

    def domain_to_model(self, payment: Payment) -> PaymentModel:
        return PaymentModel(
            id=payment.id,
            contract_id=payment.contract_id,
            client_id=payment.client_id,
            amount_dh=payment.amount_dh,
            payment_date=payment.payment_date,
            payment_for=payment.payment_for,
            status=payment.status.value,
            payment_method=payment.payment_method.value,
            cheque_number=payment.cheque_number,
            bank_name=payment.bank_name,
            transfer_series=payment.transfer_series,
            effect_number=payment.effect_number,
            receipt_url=payment.receipt_url,
            created_at=payment.created_at,
        )

    def model_to_domain(self, model: PaymentModel) -> Payment:
        payment = Payment(
            id=model.id,
            contract_id=model.contract_id,
            client_id=model.client_id or "",
            amount_dh=model.amount_dh or 0.0,
            payment_date=model.payment_date,
            payment_for=model.payment_for or "",
            status=PaymentStatus(model.status) if model.status else PaymentStatus.PAID,
            payment_method=(
                PaymentMethod(model.payment_method) if model.payment_method else PaymentMethod.CASH
            ),
            cheque_number=model.cheque_number,
            bank_name=model.bank_name,
            transfer_series=model.transfer_series,
            effect_number=model.effect_number,
            receipt_url=model.receipt_url,
        )
        if model.created_at:
            payment.created_at = model.created_at
        return payment
