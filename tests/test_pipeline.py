import pytest

from lazyseq import HOLE, Hole, InvalidArgumentError, compose, func, normalize, ops, pipe, stage, stages

PEOPLE = [
    {"name": "Abby", "age": 19},
    {"name": "Benny", "age": 21},
    {"name": "Cally", "age": 22},
    {"name": "Danny", "age": 24},
    {"name": "Danny", "age": 23},
    {"name": "Eddy", "age": 18},
]


@pytest.mark.parametrize("source", [[1, 2, 3], {"a": 1, "b": 2}, "xyz", []])
def test_empty_pipeline_is_normalize(source):
    assert list(pipe(source, []).items()) == list(normalize(source).items())


def test_operations_apply_left_to_right():
    calls = []

    def record(name):
        def operation(value):
            calls.append(name)
            return value

        return operation

    pipe([1], [record("first"), record("second"), record("third")])
    assert calls == ["first", "second", "third"]


def test_pipeline_over_people():
    names = pipe(
        PEOPLE,
        [
            stages.filter(func.compose([func.index("age"), func.operator(">=", 20)])),
            stages.map(func.index("name")),
            stages.debounce(),
        ],
    )
    assert list(names) == ["Benny", "Cally", "Danny"]


def test_pipeline_is_lazy_until_drained():
    seen = []
    result = pipe(PEOPLE, [stages.tap(lambda value, key: seen.append(key)), stages.take(2)])
    assert seen == []
    assert len(list(result)) == 2
    assert seen == [0, 1]


def test_switch_map_after_a_terminal_stage():
    letters = pipe(
        PEOPLE,
        [
            stages.map(func.index("name")),
            stages.first(),
            stages.switch_map(list),
            stages.debounce(),
            stages.map(str.upper),
        ],
    )
    assert list(letters) == ["A", "B", "Y"]


def test_parameter_errors_surface_when_the_stage_is_applied():
    operation = stages.chunk(0)
    with pytest.raises(InvalidArgumentError):
        pipe([1, 2], [operation])


class TestStage:
    def test_value_is_prepended_without_a_hole(self):
        take_two = stage(ops.take, 2)
        assert list(take_two([1, 2, 3])) == [1, 2]

    def test_value_fills_a_positional_hole(self):
        prefixed = stage(ops.concat, [0], HOLE)
        assert list(prefixed([1, 2])) == [0, 1, 2]

    def test_value_fills_a_keyword_hole(self):
        def describe(*, label, data):
            return f"{label}: {ops.implode(data, ',')}"

        assert stage(describe, label="nums", data=HOLE)([1, 2]) == "nums: 1,2"

    def test_any_hole_instance_works(self):
        assert list(stage(ops.concat, [0], Hole())([9])) == [0, 9]

    def test_stages_are_named_after_their_operation(self):
        assert stages.take.__name__ == "take"
        assert stages.take.__doc__ == ops.take.__doc__


def test_compose_captures_one_shot_operations():
    composed = compose(op for op in [lambda v: v + 1, lambda v: v * 10])
    assert composed(1) == 20
    assert composed(2) == 30
