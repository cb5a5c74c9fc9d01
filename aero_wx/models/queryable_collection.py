"""
Queryable collection for fluent, chainable queries over decoded reports.
"""

from collections.abc import Iterable
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    A lightweight, chainable collection for filtering in-memory records.

    Examples:
        # Attribute matching
        collection.where(station='KJFK').all()

        # Chaining
        collection.filter(lambda r: r.wind is not None).order_by(lambda r: r.station).first()

        # Grouping
        collection.group_by(lambda r: r.station)
    """

    def __init__(self, items: Union[List[T], Iterable]):
        """
        Args:
            items: List or iterable of items to wrap
        """
        self._items: List[T] = list(items) if not isinstance(items, list) else items

    def _new_collection(self, items: List[T]) -> 'QueryableCollection[T]':
        return self.__class__(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """Keep items for which predicate returns True."""
        return self._new_collection([item for item in self._items if predicate(item)])

    def where(self, **kwargs) -> 'QueryableCollection[T]':
        """
        Filter items by attribute values (AND logic).

        Examples:
            records.where(station='KATL', report_kind=ReportKind.SPECI)
        """
        def matches(item: T) -> bool:
            return all(
                getattr(item, key, None) == value
                for key, value in kwargs.items()
            )
        return self.filter(matches)

    def first(self) -> Optional[T]:
        """Return the first item or None if collection is empty."""
        return self._items[0] if self._items else None

    def last(self) -> Optional[T]:
        """Return the last item or None if collection is empty."""
        return self._items[-1] if self._items else None

    def all(self) -> List[T]:
        """Return all items as a list."""
        return self._items

    def count(self) -> int:
        return len(self._items)

    def group_by(self, key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """Group items into a dict of lists keyed by key_func, preserving order."""
        result: Dict[Any, List[T]] = {}
        for item in self._items:
            result.setdefault(key_func(item), []).append(item)
        return result

    def order_by(self, key_func: Callable[[T], Any], reverse: bool = False) -> 'QueryableCollection[T]':
        """Sort items by key_func."""
        return self._new_collection(sorted(self._items, key=key_func, reverse=reverse))

    def take(self, n: int) -> 'QueryableCollection[T]':
        """Keep the first n items."""
        return self._new_collection(self._items[:n])

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._new_collection(self._items[index])
        return self._items[index]

    def __bool__(self):
        return len(self._items) > 0

    def __repr__(self):
        return f"{self.__class__.__name__}(count={len(self._items)})"

    # --- Set operations (identity based, order preserving) ---

    def __or__(self, other: 'QueryableCollection[T]') -> 'QueryableCollection[T]':
        seen = {id(item) for item in self._items}
        result = list(self._items)
        for item in other:
            if id(item) not in seen:
                seen.add(id(item))
                result.append(item)
        return self._new_collection(result)

    def __and__(self, other: 'QueryableCollection[T]') -> 'QueryableCollection[T]':
        other_ids = {id(item) for item in other}
        return self._new_collection([item for item in self._items if id(item) in other_ids])

    def __sub__(self, other: 'QueryableCollection[T]') -> 'QueryableCollection[T]':
        other_ids = {id(item) for item in other}
        return self._new_collection([item for item in self._items if id(item) not in other_ids])
