"""Route parameter carrier"""

from typing import Iterable, Iterator, Mapping, NamedTuple, Sequence


class Param(NamedTuple):
    name: str
    value: str


class Params(Sequence[Param]):
    """Ordered (name, value) pairs extracted from a matched route"""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()):
        self._items = tuple(Param(str(name), str(value)) for name, value in items)

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "Params":
        return cls(values.items())

    def by_name(self, name: str) -> str:
        """Value of the first parameter called ``name``, or "" if there is none"""
        for param in self._items:
            if param.name == name:
                return param.value
        return ""

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Param]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Params):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Params({list(self._items)!r})"
