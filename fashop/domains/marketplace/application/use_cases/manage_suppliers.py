"""
Supplier Management Use Cases

Registration, profile edits and activation of suppliers.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from fashop.core.domain import DuplicateEntityException, PhoneNumber, SupplierNotFoundException
from fashop.domains.marketplace.application.ports import ISupplierRepository
from fashop.domains.marketplace.application.use_cases.base import retry_on_conflict
from fashop.domains.marketplace.domain.entities.supplier import Supplier

logger = logging.getLogger(__name__)


@dataclass
class CreateSupplierRequest:
    name: str
    phone: str
    email: str | None = None
    whatsapp: str | None = None
    address: str | None = None
    city: str = "Conakry"
    description: str | None = None
    categories: list[str] = field(default_factory=list)
    delivery_zones: list[str] = field(default_factory=list)


class CreateSupplierUseCase:
    """Registers a supplier; the phone number must not belong to another one."""

    def __init__(self, supplier_repository: ISupplierRepository):
        self.supplier_repository = supplier_repository

    async def execute(self, request: CreateSupplierRequest) -> Supplier:
        phone = PhoneNumber(request.phone)
        if await self.supplier_repository.get_by_phone(phone.number) is not None:
            raise DuplicateEntityException("Supplier", "phone", phone.number)

        supplier = Supplier(
            name=request.name,
            phone=phone,
            email=request.email,
            whatsapp=request.whatsapp,
            address=request.address,
            city=request.city or "Conakry",
            description=request.description,
            categories=list(request.categories),
            delivery_zones=list(request.delivery_zones),
        )
        created = await self.supplier_repository.add(supplier)
        logger.info(f"Supplier registered: {created.name} ({created.phone})")
        return created


@dataclass
class UpdateSupplierRequest:
    """Partial update; ``None`` leaves a field unchanged."""

    supplier_id: UUID
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    whatsapp: str | None = None
    address: str | None = None
    city: str | None = None
    description: str | None = None
    categories: list[str] | None = None
    delivery_zones: list[str] | None = None


class UpdateSupplierUseCase:
    """Profile edits. Rating and order statistics cannot be set directly."""

    def __init__(self, supplier_repository: ISupplierRepository, update_attempts: int = 3):
        self.supplier_repository = supplier_repository
        self.update_attempts = update_attempts

    async def execute(self, request: UpdateSupplierRequest) -> Supplier:
        new_phone = PhoneNumber(request.phone) if request.phone is not None else None
        if new_phone is not None:
            owner = await self.supplier_repository.get_by_phone(new_phone.number)
            if owner is not None and owner.id != request.supplier_id:
                raise DuplicateEntityException("Supplier", "phone", new_phone.number)

        async def apply() -> Supplier:
            supplier = await self.supplier_repository.get_by_id(request.supplier_id)
            if supplier is None:
                raise SupplierNotFoundException(request.supplier_id)
            supplier.update_profile(
                name=request.name,
                phone=new_phone,
                email=request.email,
                whatsapp=request.whatsapp,
                address=request.address,
                city=request.city,
                description=request.description,
                categories=request.categories,
                delivery_zones=request.delivery_zones,
            )
            return await self.supplier_repository.save(supplier)

        supplier = await retry_on_conflict(apply, self.update_attempts, f"supplier {request.supplier_id}")
        logger.info(f"Supplier updated: {supplier.name}")
        return supplier


class SetSupplierActiveUseCase:
    """Activate or deactivate (soft delete) a supplier."""

    def __init__(self, supplier_repository: ISupplierRepository, update_attempts: int = 3):
        self.supplier_repository = supplier_repository
        self.update_attempts = update_attempts

    async def execute(self, supplier_id: UUID, active: bool) -> Supplier:
        async def apply() -> Supplier:
            supplier = await self.supplier_repository.get_by_id(supplier_id)
            if supplier is None:
                raise SupplierNotFoundException(supplier_id)
            if active:
                supplier.activate()
            else:
                supplier.deactivate()
            return await self.supplier_repository.save(supplier)

        supplier = await retry_on_conflict(apply, self.update_attempts, f"supplier {supplier_id}")
        logger.info(f"Supplier {supplier.name} {'activated' if active else 'deactivated'}")
        return supplier
