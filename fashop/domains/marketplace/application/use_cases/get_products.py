"""
Catalog Query Use Cases
"""

from dataclasses import dataclass, field
from uuid import UUID

from fashop.core.domain import ProductNotFoundException
from fashop.domains.marketplace.application.ports import IProductRepository, ProductFilter
from fashop.domains.marketplace.application.use_cases.base import Page, clamp_pagination
from fashop.domains.marketplace.domain.entities.product import Product


class GetProductUseCase:
    def __init__(self, product_repository: IProductRepository):
        self.product_repository = product_repository

    async def execute(self, product_id: UUID) -> Product:
        product = await self.product_repository.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundException(product_id)
        return product


@dataclass
class ListProductsRequest:
    filters: ProductFilter = field(default_factory=ProductFilter)
    page: int = 1
    limit: int = 20


class ListProductsUseCase:
    """Paginated catalog listing, featured products first."""

    def __init__(self, product_repository: IProductRepository):
        self.product_repository = product_repository

    async def execute(self, request: ListProductsRequest) -> Page[Product]:
        page, limit = clamp_pagination(request.page, request.limit)
        products, total = await self.product_repository.search(request.filters, page=page, limit=limit)
        return Page(items=products, total=total, page=page, limit=limit)
