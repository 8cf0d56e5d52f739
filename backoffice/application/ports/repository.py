from typing import Protocol, Optional, List, Dict, Any, TypeVar

T = TypeVar("T")


class Repository(Protocol[T]):
    """Generic CRUD collaborator used by the catalog screens."""

    def create(self, data: Dict[str, Any]) -> T:
        ...

    def get(self, entity_id: int) -> Optional[T]:
        ...

    def update(self, entity_id: int, data: Dict[str, Any]) -> Optional[T]:
        ...

    def delete(self, entity_id: int) -> bool:
        ...

    def list(self, search: Optional[str] = None, **filters: Any) -> List[T]:
        ...
