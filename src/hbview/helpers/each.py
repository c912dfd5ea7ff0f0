"""Iteration helper replacing pybars' built-in ``each``.

The container shape is resolved once through `functools.singledispatch`
over a closed set (sequence, mapping, set, zero-argument callable). Every
shape produces the same `IterationRecord` stream, so the block body always
sees ``@key``, ``@index``, ``@first`` and ``@last``:

    {{#each items}}
      <li class="{{#if @first}}first{{/if}}">{{@index}}: {{name}}</li>
    {{else}}
      <li>Nothing here</li>
    {{/each}}

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence, Set
from functools import singledispatch
from typing import Any, NamedTuple

from pybars import Scope, strlist


class IterationRecord(NamedTuple):
    """One step of an ``each`` loop."""

    key: Any
    value: Any
    index: int
    first: bool
    last: bool


def _records(pairs: list[tuple[Any, Any]]) -> Iterator[IterationRecord]:
    size = len(pairs)
    for index, (key, value) in enumerate(pairs):
        yield IterationRecord(key, value, index, index == 0, index == size - 1)


@singledispatch
def iteration_records(iterable: Any) -> Iterator[IterationRecord]:
    """Yield iteration records for a supported container.

    Raises:
        TypeError: For shapes outside the supported set (including ``str``,
            which is almost always a template mistake)
    """
    raise TypeError(f"each cannot iterate over {type(iterable).__name__}")


@iteration_records.register(Sequence)
def _(iterable: Sequence[Any]) -> Iterator[IterationRecord]:
    if isinstance(iterable, (str, bytes)):
        raise TypeError(f"each cannot iterate over {type(iterable).__name__}")
    return _records(list(enumerate(iterable)))


@iteration_records.register(Mapping)
def _(iterable: Mapping[Any, Any]) -> Iterator[IterationRecord]:
    return _records(list(iterable.items()))


@iteration_records.register(Set)
def _(iterable: Set[Any]) -> Iterator[IterationRecord]:
    return _records(list(enumerate(iterable)))


def each(this: Any, options: dict[str, Any], iterable: Any) -> Any:
    """Handlebars block helper iterating sequences, mappings and sets."""
    if iterable is None:
        return ""
    if callable(iterable):
        iterable = iterable(this)

    result = strlist()
    rendered = False
    for record in iteration_records(iterable):
        scope = Scope(
            record.value,
            this,
            options.get("root"),
            index=record.index,
            key=record.key,
            first=record.first,
            last=record.last,
        )
        result.grow(options["fn"](scope))
        rendered = True

    if not rendered:
        return options["inverse"](this) or ""
    return result
