import pytest

from lazyseq import CachingReplaySeq, InvalidArgumentError, Phase, PreconditionViolationError, from_pairs, gen, ops


def counting(values, pulled):
    for value in values:
        pulled.append(value)
        yield value


def failing_after(values, error):
    yield from values
    raise error


class TestFirstPass:
    def test_construction_pulls_nothing(self):
        pulled = []
        seq = CachingReplaySeq(counting([1, 2, 3], pulled))
        assert pulled == []
        assert seq.phase is Phase.FIRST_PASS

    def test_reset_before_any_read_stays_lazy(self):
        pulled = []
        seq = CachingReplaySeq(counting([1, 2, 3], pulled))
        seq.reset()
        assert pulled == []
        assert seq.phase is Phase.FIRST_PASS

    def test_each_position_is_pulled_once(self):
        pulled = []
        seq = CachingReplaySeq(counting([1, 2, 3], pulled))
        seq.reset()
        seq.has_current()
        seq.current_value()
        seq.current_key()
        assert pulled == [1]

    def test_full_first_pass_switches_to_replay(self):
        seq = CachingReplaySeq(iter([1, 2]))
        assert list(seq) == [1, 2]
        assert seq.phase is Phase.REPLAY


class TestReplay:
    def test_drain_reset_drain_is_identical(self):
        seq = CachingReplaySeq(from_pairs(iter([("a", 1), ("b", 2), ("a", 3)])))
        first = list(seq.items())
        second = list(seq.items())
        assert first == second == [("a", 1), ("b", 2), ("a", 3)]

    def test_partial_drain_then_reset_completes_the_cache(self):
        pulled = []
        seq = CachingReplaySeq(counting([10, 20, 30], pulled))
        seq.reset()
        assert seq.current_value() == 10

        seq.reset()

        assert seq.phase is Phase.REPLAY
        assert pulled == [10, 20, 30]
        assert list(seq) == [10, 20, 30]
        assert pulled == [10, 20, 30]

    def test_source_is_closed_once_fully_cached(self):
        released = []

        def source():
            try:
                yield from [1, 2]
            finally:
                released.append(True)

        seq = CachingReplaySeq(source())
        seq.has_current()
        seq.reset()
        assert released == [True]


class TestSeek:
    def test_seek_positions_the_cursor(self):
        seq = CachingReplaySeq(gen.range(1, 5))
        seq.seek(2)
        assert seq.current_value() == 3
        assert seq.position == 2

    def test_seek_matches_draining_p_elements(self):
        seq = CachingReplaySeq(iter("abcde"))
        seq.reset()
        seq.advance()
        seq.advance()
        drained = seq.current_value()
        seq.seek(2)
        assert seq.current_value() == drained == "c"

    def test_seek_to_length_is_past_the_end(self):
        seq = CachingReplaySeq([1, 2, 3])
        seq.seek(3)
        assert not seq.has_current()

    @pytest.mark.parametrize("position", [-1, 4])
    def test_seek_out_of_range_is_rejected(self, position):
        seq = CachingReplaySeq([1, 2, 3])
        with pytest.raises(InvalidArgumentError):
            seq.seek(position)


class TestSort:
    def test_keys_travel_with_values(self):
        seq = CachingReplaySeq(from_pairs([(0, 5), (1, 3), (2, 4)]))
        seq.sort()
        assert list(seq.items()) == [(1, 3), (2, 4), (0, 5)]

    def test_three_way_comparator(self):
        seq = CachingReplaySeq(iter([3, 1, 2]))
        seq.sort(lambda a, b: b - a)
        assert list(seq) == [3, 2, 1]

    def test_key_selector(self):
        seq = CachingReplaySeq(["ccc", "a", "bb"])
        seq.sort(key=len)
        assert list(seq) == ["a", "bb", "ccc"]

    def test_sort_rewinds_the_cursor(self):
        seq = CachingReplaySeq([2, 1])
        seq.seek(1)
        seq.sort()
        assert seq.position == 0
        assert seq.current_value() == 1

    def test_comparator_and_key_are_exclusive(self):
        seq = CachingReplaySeq([1])
        with pytest.raises(InvalidArgumentError):
            seq.sort(lambda a, b: a - b, key=abs)


def test_count_drains_the_source():
    pulled = []
    seq = CachingReplaySeq(counting([1, 2, 3], pulled))
    assert seq.count() == 3
    assert pulled == [1, 2, 3]
    assert ops.count(seq) == 3


def test_wrapping_a_replay_shares_its_cache():
    pulled = []
    inner = CachingReplaySeq(counting([1, 2, 3], pulled))
    outer = CachingReplaySeq(inner)

    assert list(outer) == [1, 2, 3]
    assert list(inner) == [1, 2, 3]
    assert pulled == [1, 2, 3]


def test_cursors_over_a_shared_cache_are_independent():
    inner = CachingReplaySeq([1, 2, 3])
    outer = CachingReplaySeq(inner)
    inner.seek(2)
    outer.reset()
    assert outer.current_value() == 1
    assert inner.current_value() == 3


class TestFailure:
    def test_first_pass_failure_propagates_unchanged(self):
        seq = CachingReplaySeq(failing_after([1, 2], RuntimeError("boom")))
        with pytest.raises(RuntimeError, match="boom"):
            list(seq)

    def test_failed_cache_is_poisoned(self):
        error = RuntimeError("boom")
        seq = CachingReplaySeq(failing_after([1, 2], error))
        with pytest.raises(RuntimeError):
            list(seq)

        with pytest.raises(PreconditionViolationError) as info:
            seq.reset()
        assert info.value.__cause__ is error

        for call in (seq.count, lambda: seq.seek(0), seq.sort, seq.has_current):
            with pytest.raises(PreconditionViolationError):
                call()

    def test_failure_during_forced_drain(self):
        seq = CachingReplaySeq(failing_after([1, 2], ValueError("bad row")))
        seq.reset()
        assert seq.current_value() == 1
        with pytest.raises(ValueError, match="bad row"):
            seq.reset()
        with pytest.raises(PreconditionViolationError):
            list(seq)

    def test_close_during_first_pass_poisons_the_cache(self):
        released = []

        def source():
            try:
                yield from [1, 2, 3]
            finally:
                released.append(True)

        seq = CachingReplaySeq(source())
        seq.reset()
        assert seq.current_value() == 1
        seq.close()

        assert released == [True]
        with pytest.raises(PreconditionViolationError):
            seq.reset()

    def test_close_after_caching_is_harmless(self):
        seq = CachingReplaySeq(iter([1, 2]))
        assert list(seq) == [1, 2]
        seq.close()
        assert list(seq) == [1, 2]
