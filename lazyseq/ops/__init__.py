from .effects import scan, tap, validate
from .filtering import (
    debounce,
    distinct,
    drop,
    drop_while,
    filter,
    filter_keys,
    filter_with_keys,
    remove_empty,
    remove_none,
    slice,
    take,
    take_while,
    where,
)
from .mapping import (
    flip,
    from_key_pairs,
    keys,
    map,
    map_keys,
    map_recursive,
    map_with_keys,
    pluck,
    reindex,
    to_key_pairs,
    values,
)
from .restructuring import (
    chunk,
    combine_latest,
    concat,
    flat_map,
    flatten,
    interleave,
    interpose,
    leaves,
    partition,
    replace_keys,
    replace_values,
    replay,
    resume,
    zip,
)
from .terminal import (
    all,
    any,
    apply,
    apply_recursive,
    collection,
    count,
    first,
    implode,
    last,
    reduce,
    reduce_recursive,
    rewindable,
    search,
    to_dict,
    to_list,
    to_list_recursive,
    to_result,
    to_string,
    validate_all,
)

__all__ = (
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
    "to_string",
    # Result-returning (kungfu)
    "to_result",
    "validate_all",
)
