import types

import pytest

from lazyseq import HOLE, InvalidArgumentError, func


class TestAccessors:
    def test_method(self):
        assert func.method("strip", "/")("/path/") == "path"

    def test_attribute(self):
        obj = types.SimpleNamespace(name="x")
        assert func.attribute("name")(obj) == "x"
        assert func.attribute("missing", "default")(obj) == "default"

    def test_index(self):
        assert func.index("a")({"a": 1}) == 1
        assert func.index(5, "none")([1, 2]) == "none"
        assert func.index("a")({}) is None


class TestPredicates:
    def test_truthy_and_falsey(self):
        assert func.truthy()(1) and not func.truthy()("")
        assert func.falsey()(0) and not func.falsey()("x")

    def test_not(self):
        assert func.not_(func.odd())(2)

    @pytest.mark.parametrize(("value", "odd"), [(1, True), (2, False), (-3, True), (0, False)])
    def test_odd_and_even(self, value, odd):
        assert func.odd()(value) is odd
        assert func.even()(value) is not odd

    def test_unary_drops_extra_arguments(self):
        assert func.unary(str.upper)("a", "key") == "A"


def test_compose_runs_left_to_right():
    assert func.compose([str, len, func.operator("*", 10)])(12345) == 50
    assert func.compose([])("unchanged") == "unchanged"


class TestOperator:
    @pytest.mark.parametrize(
        ("symbol", "left", "right", "expected"),
        [
            ("+", 3, 7, 10),
            ("-", 3, 7, -4),
            ("*", 3, 7, 21),
            ("/", 7, 2, 3.5),
            ("//", 7, 2, 3),
            ("%", 7, 2, 1),
            ("**", 2, 3, 8),
            ("==", 1, 1, True),
            ("!=", 1, 1, False),
            (">=", 2, 3, False),
            ("<", 2, 3, True),
            ("in", 2, [1, 2], True),
            ("<=>", 1, 2, -1),
            ("<=>", 2, 2, 0),
            ("isinstance", 1, int, True),
        ],
    )
    def test_binary_form(self, symbol, left, right, expected):
        assert func.operator(symbol)(left, right) == expected

    def test_right_operand_is_bound(self):
        double = func.operator("*", 2)
        assert double(3) == 6
        assert double(3, "ignored key") == 6

    def test_explicit_hole_is_the_binary_form(self):
        assert func.operator("+", HOLE)(1, 2) == 3

    def test_unknown_operator(self):
        with pytest.raises(InvalidArgumentError):
            func.operator("<>")

    def test_missing_right_operand(self):
        with pytest.raises(InvalidArgumentError):
            func.operator("+")(1)

    def test_invalid_argument_is_a_value_error(self):
        with pytest.raises(ValueError):
            func.operator("???")
