"""Variable scope shared by the steps of one workflow run."""

from collections.abc import Iterator, Mapping


class VariableScope:
    """Ordered, case-sensitive key -> string store.

    Seeded from the workflow env and never reset between steps: each
    step's captured output is added for every later step to reference.
    Last write wins and keeps the key's original position.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = {}
        if initial:
            for key, value in initial.items():
                self.set(key, value)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def as_dict(self) -> dict[str, str]:
        """Snapshot of the current values."""
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableScope({self._values!r})"
