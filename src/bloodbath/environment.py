"""Global name -> value store shared by every line of a session."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .values import NOOP, Value, validate_value


class Environment(Mapping[str, Value]):
    """Mutable global scope with auto-vivification.

    Reading a name that was never bound binds it to ``Noop`` before
    returning, so after any read the name is always present. Builtin
    verbs are ordinary bindings and can be overwritten with :meth:`set`.
    There is no deletion.
    """

    def __init__(self, data: Mapping[str, Value] | None = None) -> None:
        self._bindings: dict[str, Value] = {}
        if data is not None:
            for name, value in data.items():
                self.set(name, value)

    def get(self, name: str) -> Value:  # type: ignore[override]
        try:
            return self._bindings[name]
        except KeyError:
            self._bindings[name] = NOOP
            return NOOP

    def set(self, name: str, value: Value) -> None:
        validate_value(value, where=f"name {name!r}")
        self._bindings[name] = value

    def __getitem__(self, name: str) -> Value:
        return self.get(name)

    def __setitem__(self, name: str, value: Value) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"Environment({self._bindings!r})"
