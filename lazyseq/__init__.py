"""
Lazy sequence combinators.

A pull-based sequence protocol with composable lazy operations and wrapper
types that add capabilities on top of single-pass sources.

Architecture:
- Seq - the cursor protocol (reset / advance / has_current / current_*)
- normalize() - adapts any iterable or mapping into a Seq
- DeferredSeq - replay by regeneration (factory re-run on every pass)
- CachingReplaySeq - replay by recording (first pass cached, then replayed)
- Collection - fluent, single-use wrapper that refuses silent re-iteration
- ops.* / stages.* - the operation catalog, direct and pipe-able
- gen.* / func.* - source constructors and callable helpers

Operations live in namespaces (ops.map, stages.map) rather than at the root,
so a star import never shadows map, filter or zip.
"""

import logging

# Core types
from ._types import HOLE, Comparator, Hole, KeyedPredicate, Mapper, Operation, Pair, Predicate, Reducer, Selector

# Errors
from ._errors import AlreadyConsumedError, InvalidArgumentError, PreconditionViolationError, ValidationError

# Protocol & normalizer
from .protocol import Seq, Stage, Upstream
from .normalize import IterableSeq, Source, from_pairs, normalize

# Replay wrappers
from .deferred import DeferredSeq
from .replay import CachingReplaySeq, Phase

# Namespaces
from . import func, gen, ops, stages
from .gen import ResourceSeq, with_resource

# Composition
from .pipeline import compose, pipe, stage

# Fluent wrapper
from .collection import Collection

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    # Types
    "Comparator",
    "KeyedPredicate",
    "Mapper",
    "Operation",
    "Pair",
    "Predicate",
    "Reducer",
    "Selector",
    "Source",
    # Placeholder
    "HOLE",
    "Hole",
    # Errors
    "AlreadyConsumedError",
    "InvalidArgumentError",
    "PreconditionViolationError",
    "ValidationError",
    # Protocol
    "IterableSeq",
    "Seq",
    "Stage",
    "Upstream",
    "from_pairs",
    "normalize",
    # Wrappers
    "CachingReplaySeq",
    "Collection",
    "DeferredSeq",
    "Phase",
    "ResourceSeq",
    "with_resource",
    # Composition
    "compose",
    "pipe",
    "stage",
    # Namespaces
    "func",
    "gen",
    "ops",
    "stages",
)
