"""Abstract interface for product and supplier storage."""

from abc import ABC, abstractmethod

from parstock.core.entities.catalog import Product, Supplier


class ICatalogStore(ABC):
    """Interface for catalog persistence, scoped by venue."""

    @abstractmethod
    async def list_products(self, venue_id: str) -> list[Product]:
        """List every product in the venue, ordered by name."""
        pass

    @abstractmethod
    async def get_product(self, venue_id: str, product_id: str) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def save_product(self, product: Product) -> Product:
        """Insert or replace a product."""
        pass

    @abstractmethod
    async def update_product_fields(
        self, venue_id: str, product_id: str, **fields: object
    ) -> Product | None:
        """Update selected columns. Returns None if the product is gone."""
        pass

    @abstractmethod
    async def list_suppliers(self, venue_id: str) -> list[Supplier]:
        """List suppliers in the venue, ordered by name."""
        pass

    @abstractmethod
    async def get_supplier(self, venue_id: str, supplier_id: str) -> Supplier | None:
        """Get supplier by ID."""
        pass

    @abstractmethod
    async def save_supplier(self, supplier: Supplier) -> Supplier:
        """Insert or replace a supplier."""
        pass

    @abstractmethod
    async def ensure_unassigned_supplier(self, venue_id: str) -> Supplier:
        """Create the sentinel unassigned supplier if it does not exist."""
        pass
