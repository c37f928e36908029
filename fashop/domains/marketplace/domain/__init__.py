"""
Marketplace Domain Layer

Domain-Driven Design implementation for the marketplace bounded context.

This module contains:
- Entities: Business objects with identity (Product, Supplier, Order)
- Value Objects: Immutable domain primitives (Price, SKU, OrderNumber, statuses)
- Domain Services: Margin and supplier scoring formulas
"""
