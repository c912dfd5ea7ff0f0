"""Helper registry for the hbview engine.

``engine.helpers`` is a view over the helper table the engine hands to
every pybars template call. Helpers are looked up when a template runs,
so registering one after its templates compiled is fine.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hbview.environment.core import ViewEngine

Helper = Callable[..., object]


def _check_helper(name: object, helper: object) -> None:
    if not isinstance(name, str) or not name:
        raise TypeError(f"Helper name must be a non-empty string, got {name!r}")
    if not callable(helper):
        raise TypeError(f"Helper '{name}' must be callable, got {type(helper).__name__}")


class HelperRegistry:
    """Mapping-style access to an engine's Handlebars helpers.

    Supports:
        - engine.helpers['upper'] = lambda this, s: s.upper()
        - engine.helpers.update({'upper': ..., 'lower': ...})
        - 'upper' in engine.helpers
        - del engine.helpers['upper']

    Every change swaps in a new table, so a render already holding the old
    one finishes with the helpers it started with.
    """

    __slots__ = ("_engine",)

    def __init__(self, engine: ViewEngine):
        self._engine = engine

    def __getitem__(self, name: str) -> Helper:
        return self._engine._helpers[name]

    def __setitem__(self, name: str, helper: Helper) -> None:
        self.update({name: helper})

    def __delitem__(self, name: str) -> None:
        table = dict(self._engine._helpers)
        del table[name]
        self._engine._helpers = table

    def __contains__(self, name: object) -> bool:
        return name in self._engine._helpers

    def update(self, helpers: Mapping[str, Helper]) -> None:
        """Register several helpers at once; nothing changes if one is invalid."""
        for name, helper in helpers.items():
            _check_helper(name, helper)
        self._engine._helpers = {**self._engine._helpers, **helpers}
