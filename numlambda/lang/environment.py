"""Persistent name -> Value mapping used during evaluation."""

from collections.abc import Mapping


class Environment(Mapping):
    """Immutable mapping of variable names to Values. extend never mutates: it returns a new Environment, so a Closure
    holding a reference to an Environment holds a snapshot of it.
    """

    def __init__(self, bindings=None):
        self._bindings = dict(bindings) if bindings else {}

    def extend(self, name, value):
        """Returns a copy of this Environment where name is bound to value (shadowing any previous binding)."""
        return Environment({**self._bindings, name: value})

    def __getitem__(self, name):
        return self._bindings[name]

    def __iter__(self):
        return iter(self._bindings)

    def __len__(self):
        return len(self._bindings)

    def __repr__(self):
        return f"Environment({self._bindings!r})"
