"""Lookup tables from source (external) ids to the entities built for them.

The TNTP files join on textual ids only, so every reader keeps one registry
per entity kind for the duration of a single read.
"""
from __future__ import annotations

from typing import (Callable, Dict, Generic, Iterable, Iterator, Optional,
                    Type, TypeVar)

from .exceptions import DuplicateIdError

T = TypeVar('T')


class SourceIdRegistry(Generic[T]):

    def __init__(self, kind: str = 'entity'):
        self.kind = kind
        self._entities: Dict[str, T] = {}

    def get(self, source_id: str) -> Optional[T]:
        return self._entities.get(source_id)

    def register(self, source_id: str, entity: T) -> None:
        if source_id in self._entities:
            raise DuplicateIdError(
                f"Duplicate {self.kind} source id {source_id!r}"
            )
        self._entities[source_id] = entity

    def get_or_create(self, source_id: str, factory: Callable[[], T]) -> T:
        entity = self._entities.get(source_id)
        if entity is None:
            entity = factory()
            self._entities[source_id] = entity
        return entity

    def clear(self) -> None:
        self._entities.clear()

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)


class SourceIdRegistries:
    """One :class:`SourceIdRegistry` per entity class."""

    def __init__(self):
        self._registries: Dict[type, SourceIdRegistry] = {}

    def __getitem__(self, kind: Type[T]) -> SourceIdRegistry[T]:
        if kind not in self._registries:
            self._registries[kind] = SourceIdRegistry(kind.__name__)
        return self._registries[kind]

    def seed(self, kind: Type[T], entities: Iterable[T]) -> None:
        """Register already-built entities so later lookups can find them."""
        registry = self[kind]
        for entity in entities:
            registry.register(entity.external_id, entity)

    def clear(self) -> None:
        self._registries.clear()
