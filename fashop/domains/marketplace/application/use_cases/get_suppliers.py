"""
Supplier Query Use Cases
"""

from dataclasses import dataclass, field
from uuid import UUID

from fashop.core.domain import SupplierNotFoundException
from fashop.domains.marketplace.application.ports import ISupplierRepository, SupplierFilter
from fashop.domains.marketplace.application.use_cases.base import Page, clamp_pagination
from fashop.domains.marketplace.domain.entities.supplier import Supplier


class GetSupplierUseCase:
    def __init__(self, supplier_repository: ISupplierRepository):
        self.supplier_repository = supplier_repository

    async def execute(self, supplier_id: UUID) -> Supplier:
        supplier = await self.supplier_repository.get_by_id(supplier_id)
        if supplier is None:
            raise SupplierNotFoundException(supplier_id)
        return supplier


@dataclass
class ListSuppliersRequest:
    filters: SupplierFilter = field(default_factory=SupplierFilter)
    page: int = 1
    limit: int = 20


class ListSuppliersUseCase:
    """Best rated suppliers first."""

    def __init__(self, supplier_repository: ISupplierRepository):
        self.supplier_repository = supplier_repository

    async def execute(self, request: ListSuppliersRequest) -> Page[Supplier]:
        page, limit = clamp_pagination(request.page, request.limit)
        suppliers, total = await self.supplier_repository.search(request.filters, page=page, limit=limit)
        return Page(items=suppliers, total=total, page=page, limit=limit)
