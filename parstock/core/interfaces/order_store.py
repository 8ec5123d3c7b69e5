"""Abstract interface for purchase order storage."""

from abc import ABC, abstractmethod

from parstock.core.entities.orders import Order, OrderLine, OrderStatus


class IOrderStore(ABC):
    """Interface for order header and line persistence."""

    @abstractmethod
    async def get_order(self, venue_id: str, order_id: str) -> Order | None:
        pass

    @abstractmethod
    async def list_orders(
        self, venue_id: str, status: OrderStatus | None = None, limit: int = 100
    ) -> list[Order]:
        pass

    @abstractmethod
    async def list_order_lines(self, order_id: str) -> list[OrderLine]:
        pass

    @abstractmethod
    async def create_order(self, order: Order, lines: list[OrderLine]) -> Order:
        """Write the header and all lines atomically."""
        pass

    @abstractmethod
    async def find_draft_by_suggestion_key(
        self, venue_id: str, suggestion_key: str
    ) -> Order | None:
        """Find an existing draft created from the same suggestion set."""
        pass
