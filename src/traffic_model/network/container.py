from __future__ import annotations

from itertools import count
from typing import Callable, Generic, Iterator, List, TypeVar

T = TypeVar('T')


class EntityContainer(Generic[T]):
    """Append-only collection handing out sequential internal ids.

    Entities are created through :meth:`register_new`, which passes the next
    id as the first argument of the factory.
    """

    def __init__(self):
        self._entities: List[T] = []
        self._ids = count()

    def register_new(self, factory: Callable[..., T], *args, **kwargs) -> T:
        entity = factory(next(self._ids), *args, **kwargs)
        self._entities.append(entity)
        return entity

    def first(self) -> T:
        return self._entities[0]

    def __getitem__(self, i: int) -> T:
        return self._entities[i]

    def __iter__(self) -> Iterator[T]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __bool__(self) -> bool:
        return bool(self._entities)
