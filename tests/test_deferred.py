import pytest

from lazyseq import DeferredSeq, gen, ops


def make_counting_factory():
    calls = []

    def factory():
        calls.append(1)
        yield from [1, 2, 3]

    return factory, calls


def test_nothing_runs_at_construction():
    factory, calls = make_counting_factory()
    DeferredSeq(factory)
    assert calls == []


def test_factory_runs_once_per_pass():
    factory, calls = make_counting_factory()
    seq = DeferredSeq(factory)

    output = "".join(str(value) for _ in range(5) for value in seq)

    assert len(calls) == 5
    assert output == "123" * 5


def test_k_resets_invoke_factory_k_plus_one_times():
    factory, calls = make_counting_factory()
    seq = DeferredSeq(factory)

    while seq.has_current():
        seq.advance()
    for _ in range(3):
        seq.reset()
        while seq.has_current():
            seq.advance()

    assert len(calls) == 4


def test_bound_arguments_are_reused():
    def countdown(start, *, step):
        return range(start, 0, -step)

    seq = DeferredSeq(countdown, 6, step=2)
    assert list(seq) == [6, 4, 2]
    assert list(seq) == [6, 4, 2]


def test_independent_instances_do_not_share_state():
    factory, calls = make_counting_factory()
    first = DeferredSeq(factory)
    second = DeferredSeq(factory)

    first.reset()
    first.advance()
    assert first.current_value() == 2

    second.reset()
    assert second.current_value() == 1
    assert len(calls) == 2


def test_reset_discards_a_partial_materialization():
    released = []

    def factory():
        try:
            yield from [1, 2, 3]
        finally:
            released.append(True)

    seq = DeferredSeq(factory)
    seq.reset()
    assert seq.current_value() == 1
    assert seq.materialized

    seq.reset()
    assert released == [True]
    assert not seq.materialized


def test_factory_failure_propagates_and_is_retried():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise ConnectionError("not yet")
        return [1, 2]

    seq = DeferredSeq(flaky)
    with pytest.raises(ConnectionError):
        seq.has_current()
    assert not seq.materialized

    assert list(seq) == [1, 2]
    assert len(attempts) == 2


def test_works_as_an_operation_source():
    seq = gen.defer(lambda: iter([1, 2, 3, 4]))
    doubled = ops.map(seq, lambda v: v * 2)
    assert list(doubled) == [2, 4, 6, 8]
    assert list(doubled) == [2, 4, 6, 8]
