"""
Pipe-able stages
================

One factory per operation: stages.take(3) is the unary operation
`lambda seq: ops.take(seq, 3)`, ready for pipe().

    from lazyseq import pipe, stages

    pipe(people, [stages.map(func.index("name")), stages.first()])

The table below is fixed; there is no lookup of operations by name.
"""

from __future__ import annotations

import typing
from collections.abc import Callable

from . import ops
from ._types import Mapper, Operation
from .normalize import Source, normalize
from .pipeline import stage


def _pipeable(op: Callable[..., typing.Any]) -> Callable[..., Operation]:
    def factory(*args: typing.Any, **kwargs: typing.Any) -> Operation:
        return stage(op, *args, **kwargs)

    factory.__name__ = factory.__qualname__ = op.__name__
    factory.__doc__ = op.__doc__
    return factory


def switch_map(fn: Mapper[typing.Any, Source[typing.Any, typing.Any]]) -> Operation:
    """
    Replace the pipeline value with the sequence fn(value).

    Handy after a terminal stage such as first():

        pipe(people, [stages.map(func.index("name")), stages.first(), stages.switch_map(list)])
    """

    def switch(value: typing.Any) -> typing.Any:
        return normalize(fn(value))

    return switch


# Mapping
map = _pipeable(ops.map)
map_with_keys = _pipeable(ops.map_with_keys)
map_keys = _pipeable(ops.map_keys)
map_recursive = _pipeable(ops.map_recursive)
reindex = _pipeable(ops.reindex)
pluck = _pipeable(ops.pluck)
keys = _pipeable(ops.keys)
values = _pipeable(ops.values)
flip = _pipeable(ops.flip)
to_key_pairs = _pipeable(ops.to_key_pairs)
from_key_pairs = _pipeable(ops.from_key_pairs)

# Filtering
filter = _pipeable(ops.filter)
filter_with_keys = _pipeable(ops.filter_with_keys)
filter_keys = _pipeable(ops.filter_keys)
remove_none = _pipeable(ops.remove_none)
remove_empty = _pipeable(ops.remove_empty)
where = _pipeable(ops.where)
take = _pipeable(ops.take)
drop = _pipeable(ops.drop)
slice = _pipeable(ops.slice)
take_while = _pipeable(ops.take_while)
drop_while = _pipeable(ops.drop_while)
debounce = _pipeable(ops.debounce)
distinct = _pipeable(ops.distinct)

# Restructuring
chunk = _pipeable(ops.chunk)
partition = _pipeable(ops.partition)
replay = _pipeable(ops.replay)
concat = _pipeable(ops.concat)
combine_latest = _pipeable(ops.combine_latest)
flat_map = _pipeable(ops.flat_map)
flatten = _pipeable(ops.flatten)
leaves = _pipeable(ops.leaves)
zip = _pipeable(ops.zip)
interleave = _pipeable(ops.interleave)
interpose = _pipeable(ops.interpose)
replace_keys = _pipeable(ops.replace_keys)
replace_values = _pipeable(ops.replace_values)
resume = _pipeable(ops.resume)

# Effects
tap = _pipeable(ops.tap)
validate = _pipeable(ops.validate)
scan = _pipeable(ops.scan)

# Terminal
reduce = _pipeable(ops.reduce)
reduce_recursive = _pipeable(ops.reduce_recursive)
first = _pipeable(ops.first)
last = _pipeable(ops.last)
search = _pipeable(ops.search)
any = _pipeable(ops.any)
all = _pipeable(ops.all)
count = _pipeable(ops.count)
apply = _pipeable(ops.apply)
apply_recursive = _pipeable(ops.apply_recursive)
implode = _pipeable(ops.implode)
to_list = _pipeable(ops.to_list)
to_list_recursive = _pipeable(ops.to_list_recursive)
to_dict = _pipeable(ops.to_dict)
to_string = _pipeable(ops.to_string)
rewindable = _pipeable(ops.rewindable)
collection = _pipeable(ops.collection)
validate_all = _pipeable(ops.validate_all)
to_result = _pipeable(ops.to_result)


__all__ = (
    "switch_map",
    # Mapping
    "flip",
    "from_key_pairs",
    "keys",
    "map",
    "map_keys",
    "map_recursive",
    "map_with_keys",
    "pluck",
    "reindex",
    "to_key_pairs",
    "values",
    # Filtering
    "debounce",
    "distinct",
    "drop",
    "drop_while",
    "filter",
    "filter_keys",
    "filter_with_keys",
    "remove_empty",
    "remove_none",
    "slice",
    "take",
    "take_while",
    "where",
    # Restructuring
    "chunk",
    "combine_latest",
    "concat",
    "flat_map",
    "flatten",
    "interleave",
    "interpose",
    "leaves",
    "partition",
    "replace_keys",
    "replace_values",
    "replay",
    "resume",
    "zip",
    # Effects
    "scan",
    "tap",
    "validate",
    # Terminal
    "all",
    "any",
    "apply",
    "apply_recursive",
    "collection",
    "count",
    "first",
    "implode",
    "last",
    "reduce",
    "reduce_recursive",
    "rewindable",
    "search",
    "to_dict",
    "to_list",
    "to_list_recursive",
    "to_result",
    "to_string",
    "validate_all",
)
