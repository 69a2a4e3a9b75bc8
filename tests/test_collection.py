import pytest

from lazyseq import AlreadyConsumedError, CachingReplaySeq, Collection, func, ops, stages

PEOPLE = [
    {"name": "Abby", "age": 19},
    {"name": "Benny", "age": 21},
    {"name": "Cally", "age": 22},
    {"name": "Danny", "age": 24},
    {"name": "Danny", "age": 23},
    {"name": "Eddy", "age": 18},
]


class TestConsumption:
    def test_second_terminal_raises(self):
        collection = Collection([1, 2, 3])
        assert collection.to_list() == [1, 2, 3]

        with pytest.raises(AlreadyConsumedError) as info:
            collection.count()

        assert info.value.collection is collection
        assert info.value.operation == "count"
        assert info.value.consumed_by == "to_list"

    def test_generator_source_is_not_silently_rerun(self):
        collection = Collection(x * 2 for x in range(3))
        assert list(collection) == [0, 2, 4]
        with pytest.raises(AlreadyConsumedError):
            list(collection)

    def test_reset_consumes(self):
        collection = Collection([1])
        collection.reset()
        with pytest.raises(AlreadyConsumedError):
            collection.reset()

    def test_items_consume_eagerly(self):
        collection = Collection({"a": 1})
        pairs = collection.items()
        assert collection.consumed
        assert list(pairs) == [("a", 1)]

    def test_cursor_calls_are_not_guarded(self):
        collection = Collection([1, 2])
        assert collection.has_current()
        assert collection.current_value() == 1
        collection.advance()
        assert collection.current_value() == 2
        assert not collection.consumed

    def test_repr_does_not_consume(self):
        collection = Collection([1])
        assert "fresh" in repr(collection)
        assert not collection.consumed
        collection.to_list()
        assert "to_list" in repr(collection)

    def test_str_consumes(self):
        collection = Collection([1, 2, 3])
        assert str(collection) == "123"
        with pytest.raises(AlreadyConsumedError):
            str(collection)

    def test_passing_to_an_operation_consumes(self):
        collection = Collection([1, 2])
        assert ops.to_list(collection) == [1, 2]
        with pytest.raises(AlreadyConsumedError):
            collection.first()

    def test_error_message_stays_short_for_large_sources(self):
        collection = Collection(list(range(100_000)))
        collection.to_list()
        with pytest.raises(AlreadyConsumedError) as info:
            collection.count()
        assert len(str(info.value)) < 300


class TestDerivation:
    def test_derived_collection_is_fresh(self):
        original = Collection([1, 2, 3])
        derived = original.map(lambda v: v + 1)
        assert isinstance(derived, Collection)
        assert not derived.consumed
        assert derived.to_list() == [2, 3, 4]

    def test_original_is_superseded_by_its_derivation(self):
        original = Collection([1, 2, 3])
        original.filter(func.odd())
        with pytest.raises(AlreadyConsumedError) as info:
            original.to_list()
        assert info.value.consumed_by == "filter"

    def test_resume_continues_after_cursor_calls(self):
        collection = Collection([1, 2, 3, 4])
        assert collection.has_current()
        collection.advance()
        assert collection.resume().to_list() == [3, 4]

    def test_chained_flow(self):
        names = (
            Collection(PEOPLE)
            .filter(func.compose([func.index("age"), func.operator(">=", 20)]))
            .map(func.index("name"))
            .debounce()
        )
        assert list(names) == ["Benny", "Cally", "Danny"]

    def test_keys_are_kept_through_derivations(self):
        result = Collection({"a": 1, "b": 2, "c": 3}).filter(func.odd()).to_dict()
        assert result == {"a": 1, "c": 3}

    def test_other_collections_as_arguments_are_consumed(self):
        tail = Collection([3, 4])
        assert Collection([1, 2]).concat(tail).to_list() == [1, 2, 3, 4]
        assert tail.consumed


class TestTerminals:
    def test_reduce(self):
        assert Collection.range(1, 4).reduce(func.operator("+"), 0) == 10

    def test_first_and_last(self):
        assert Collection([5, 6]).first() == 5
        assert Collection([5, 6]).last() == 6
        assert Collection([]).first("none") == "none"

    def test_pipe_wraps_lazy_results(self):
        result = Collection([1, 2, 3, 4]).pipe([stages.filter(func.even()), stages.map(str)])
        assert isinstance(result, Collection)
        assert result.implode(",") == "2,4"

    def test_pipe_returns_concrete_results_as_is(self):
        assert Collection([1, 2, 3]).pipe([stages.count()]) == 3

    def test_rewindable_hands_over_to_a_replay(self):
        collection = Collection(iter([1, 2, 3]))
        replay = collection.rewindable()
        assert isinstance(replay, CachingReplaySeq)
        assert list(replay) == list(replay) == [1, 2, 3]
        with pytest.raises(AlreadyConsumedError):
            collection.to_list()

    def test_sorted_keeps_keys(self):
        result = Collection({"x": 3, "y": 1, "z": 2}).sorted().to_dict()
        assert list(result.items()) == [("y", 1), ("z", 2), ("x", 3)]

    def test_to_list_recursive(self):
        assert Collection([1, [2, [3]]]).to_list_recursive() == [1, [2, [3]]]


class TestConstructors:
    def test_range(self):
        assert Collection.range(3, 1).to_list() == [3, 2, 1]

    def test_repeat(self):
        assert Collection.repeat("x", 2).to_list() == ["x", "x"]

    def test_repeat_for_keys(self):
        assert Collection.repeat_for_keys(["a", "b"], 0).to_dict() == {"a": 0, "b": 0}

    def test_empty_and_just(self):
        assert Collection.empty().to_list() == []
        assert Collection.just(7).to_list() == [7]

    def test_defer(self):
        calls = []

        def factory(n):
            calls.append(n)
            return range(n)

        collection = Collection.defer(factory, 3)
        assert calls == []
        assert collection.to_list() == [0, 1, 2]
        assert calls == [3]

    def test_from_pairs(self):
        assert Collection.from_pairs([("k", 1)]).to_dict() == {"k": 1}
