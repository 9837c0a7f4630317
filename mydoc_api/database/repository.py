from typing import Generic, List, Optional, Type, TypeVar

from fastapi import Depends
from sqlalchemy.orm import Session

from .connection import get_db
from ..exceptions import NotFoundError, UnresolvedReferenceError

T = TypeVar("T")


class Repository(Generic[T]):
    """Generic persistence gateway for one entity type.

    ``add``, ``update`` and ``delete`` only stage changes in the session;
    nothing is written until ``commit`` is called. Repositories built from
    the same session share one unit of work.
    """

    def __init__(self, model: Type[T], db: Session):
        self.model = model
        self.db = db

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def get_all(self) -> List[T]:
        return self.db.query(self.model).all()

    def get_by_id(self, id, for_update: bool = False) -> Optional[T]:
        query = self.db.query(self.model)
        if for_update:
            # Lock the row and reload it so a value read before the lock is not reused
            query = query.with_for_update().populate_existing()
        return query.filter(self.model.id == id).first()

    def get_or_404(self, id, message: Optional[str] = None, for_update: bool = False) -> T:
        entity = self.get_by_id(id, for_update=for_update)
        if entity is None:
            raise NotFoundError(message or f"{self.entity_name} with given id not found")
        return entity

    def resolve(self, id, message: Optional[str] = None) -> T:
        """Look up an id referenced from a request body."""
        entity = self.get_by_id(id)
        if entity is None:
            raise UnresolvedReferenceError(message or f"{self.entity_name} with given id ({id}) not found")
        return entity

    def find(self, *criteria, for_update: bool = False) -> List[T]:
        query = self.db.query(self.model)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.filter(*criteria).all()

    def add(self, entity: T) -> T:
        self.db.add(entity)
        return entity

    def update(self, entity: T) -> T:
        self.db.add(entity)
        return entity

    def delete(self, id) -> None:
        entity = self.get_by_id(id)
        if entity is None:
            raise NotFoundError(f"{self.entity_name} with given id not found")
        self.db.delete(entity)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, entity: T) -> T:
        self.db.refresh(entity)
        return entity


def repository_for(model):
    """FastAPI dependency giving a Repository bound to the request session."""

    def _repository(db: Session = Depends(get_db)) -> Repository:
        return Repository(model, db)

    _repository.__name__ = f"{model.__name__.lower()}_repository"
    return _repository
