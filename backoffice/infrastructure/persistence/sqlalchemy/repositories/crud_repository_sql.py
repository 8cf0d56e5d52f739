from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, or_
from sqlmodel import Session, SQLModel, select

from .....application.ports.repository import Repository

ModelT = TypeVar("ModelT", bound=SQLModel)


class SqlCrudRepository(Repository[ModelT]):
    """Pass-through CRUD over one table with search/filter composition.

    ``search`` is matched case-insensitively against ``search_fields`` (OR);
    keyword filters are equality checks (AND). ``None`` filters are ignored.
    """

    def __init__(self, session: Session, model: Type[ModelT], search_fields: Sequence[str] = ()):
        self.session = session
        self.model = model
        self.search_fields = tuple(search_fields)

    def create(self, data: Dict[str, Any]) -> ModelT:
        entity = self.model(**data)
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def get(self, entity_id: int) -> Optional[ModelT]:
        return self.session.get(self.model, entity_id)

    def update(self, entity_id: int, data: Dict[str, Any]) -> Optional[ModelT]:
        entity = self.get(entity_id)
        if entity is None:
            return None
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity_id: int) -> bool:
        entity = self.get(entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self.session.commit()
        return True

    def list(self, search: Optional[str] = None, **filters: Any) -> List[ModelT]:
        query = select(self.model)

        if search and self.search_fields:
            pattern = f"%{search.lower()}%"
            query = query.where(or_(*[
                func.lower(getattr(self.model, name)).like(pattern) for name in self.search_fields
            ]))

        for name, value in filters.items():
            if value is None:
                continue
            query = query.where(getattr(self.model, name) == value)

        query = query.order_by(self.model.created_at.desc(), self.model.id.desc())
        return list(self.session.exec(query).all())
