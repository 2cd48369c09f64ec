"""
Real-estate inventory models: projects, units and clients.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum

from backoffice.domain.models.base import BaseEntity, ValidationError


class ProjectStatus(str, Enum):
    """Project status."""
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class ApartmentStatus(str, Enum):
    """Unit availability status."""
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    FOR_SALE = "for_sale"
    SOLD = "sold"


class ApartmentType(str, Enum):
    """Kind of unit."""
    APARTMENT = "apartment"
    GARAGE = "garage"


@dataclass(eq=False)
class Project(BaseEntity):
    """Aggregation root for units; occupancy counts are derived, not stored."""

    project_name: str = ""
    location: str = ""
    description: str = ""
    total_apartments: int = 0
    status: ProjectStatus = ProjectStatus.ACTIVE


@dataclass(eq=False)
class Apartment(BaseEntity):
    """A rentable or sellable unit (apartment or garage)."""

    project_id: str = ""
    name: str = ""
    type: ApartmentType = ApartmentType.APARTMENT
    floor: Optional[str] = None
    surface_m2: float = 0.0
    status: ApartmentStatus = ApartmentStatus.AVAILABLE
    price_dh: float = 0.0
    sale_price_dh: Optional[float] = None
    owner_name: str = ""
    description: str = ""
    current_contract_id: Optional[str] = None

    @property
    def has_sale_price(self) -> bool:
        return bool(self.sale_price_dh)

    @property
    def released_status(self) -> ApartmentStatus:
        """Status a unit returns to once its current sale contract goes away."""
        return ApartmentStatus.FOR_SALE if self.has_sale_price else ApartmentStatus.AVAILABLE

    def validate(self) -> None:
        if not self.name:
            raise ValidationError("Unit name is required", "name")
        if self.price_dh < 0:
            raise ValidationError("Rent price cannot be negative", "price_dh")
        if self.sale_price_dh is not None and self.sale_price_dh < 0:
            raise ValidationError("Sale price cannot be negative", "sale_price_dh")


@dataclass(eq=False)
class Client(BaseEntity):
    """Tenant or buyer."""

    full_name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    cin_number: str = ""
    occupation: str = ""
    contracts: List[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.full_name or "N/A"


def default_lock_for_status(status: ApartmentStatus) -> bool:
    """Rented and sold units are locked against edits unless explicitly unlocked."""
    return status in (ApartmentStatus.RENTED, ApartmentStatus.SOLD)


def is_locked(apartment: Apartment, overrides: Dict[str, bool]) -> bool:
    """Explicit per-unit override wins over the status default."""
    override = overrides.get(apartment.id) if apartment.id else None
    if override is not None:
        return override
    return default_lock_for_status(apartment.status)


def toggle_lock(apartment: Apartment, overrides: Dict[str, bool]) -> Dict[str, bool]:
    """Return a new override map with the unit's lock state flipped."""
    updated = dict(overrides)
    updated[apartment.id] = not is_locked(apartment, overrides)
    return updated
