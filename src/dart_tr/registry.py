from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator, List, Set


class StringRegistry:
    """
    Unique literal values collected during one run.
    Membership is exact string equality; add() never fails and never duplicates.
    """

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values: Set[str] = set(values)

    def add(self, value: str) -> None:
        self._values.add(value)

    def update(self, values: Iterable[str]) -> None:
        for v in values:
            self.add(v)

    def values(self) -> FrozenSet[str]:
        return frozenset(self._values)

    def sorted_values(self) -> List[str]:
        return sorted(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted_values())

    def __repr__(self) -> str:
        return f"StringRegistry({len(self._values)} values)"
