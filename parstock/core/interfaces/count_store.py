"""Abstract interface for the department/area/item counting tree."""

from abc import ABC, abstractmethod

from parstock.core.entities.counts import Area, AreaItem, Department


class ICountStore(ABC):
    """Interface for counting-location persistence."""

    @abstractmethod
    async def list_departments(self, venue_id: str) -> list[Department]:
        pass

    @abstractmethod
    async def list_areas(self, department_id: str) -> list[Area]:
        pass

    @abstractmethod
    async def list_items(self, area_id: str) -> list[AreaItem]:
        pass

    @abstractmethod
    async def get_item(self, venue_id: str, item_id: str) -> AreaItem | None:
        """The item, or None if it does not exist in this venue."""
        pass

    @abstractmethod
    async def save_department(self, department: Department) -> Department:
        pass

    @abstractmethod
    async def save_area(self, area: Area) -> Area:
        pass

    @abstractmethod
    async def save_item(self, item: AreaItem) -> AreaItem:
        """Insert or replace an area item."""
        pass

    @abstractmethod
    async def update_item_fields(
        self, venue_id: str, item_id: str, **fields: object
    ) -> AreaItem | None:
        """Update selected columns. Returns None if the venue has no such item."""
        pass
