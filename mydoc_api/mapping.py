"""Conversion between persisted entities and transfer objects."""
from typing import Iterable, List, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect

D = TypeVar("D", bound=BaseModel)


def to_dto(entity, dto_cls: Type[D]) -> D:
    return dto_cls.model_validate(entity)


def to_dtos(entities: Iterable, dto_cls: Type[D]) -> List[D]:
    return [to_dto(entity, dto_cls) for entity in entities]


def to_entity(dto: BaseModel, model_cls, **overrides):
    """Build a new ``model_cls`` from the DTO fields that are mapped columns.

    Unset optional fields are left to the column defaults.
    """
    columns = set(inspect(model_cls).columns.keys())
    values = {
        name: value
        for name, value in dto.model_dump(exclude_unset=True).items()
        if name in columns
    }
    values.update(overrides)
    return model_cls(**values)
