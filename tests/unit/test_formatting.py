"""Tests for tripwire.formatting package."""

import datetime as dt
import enum
import re
from dataclasses import dataclass

import pytest

from tripwire import assert_config
from tripwire.formatting import (
    CIRCULAR_TEXT,
    FormatManager,
    FormatResult,
    FormattedValue,
    Formatter,
    escape_ansi,
    format_value,
)


class Color(enum.Enum):
    RED = 1


@dataclass
class Point:
    x: int
    y: int


def sample_function():
    pass


class TestDefaults:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", '"text"'),
            (1, "1"),
            (None, "None"),
            (True, "True"),
            ([1, "a"], '[1,"a"]'),
            ((1, 2), "(1,2)"),
            ({"a": 1, "b c": 2}, '{a:1,"b c":2}'),
            ({1: "x"}, '{1:"x"}'),
            (ValueError("bad"), '[ValueError:"bad"]'),
            (ValueError, "ValueError()"),
            (sample_function, "[Function:sample_function]"),
            (Point, "[class:Point]"),
            (dt.date(2024, 1, 2), '[date:"2024-01-02"]'),
            ({1}, "Set:{1}"),
            (frozenset({1}), "frozenset:{1}"),
            (re.compile("a+", re.I), "/a+/i"),
            (b"\x01\x02", "bytes:[1,2]"),
            (Color.RED, "Color.RED"),
            (Point(1, 2), "Point:{x:1,y:2}"),
        ],
    )
    def test_renders(self, value, expected):
        assert format_value(assert_config, value) == expected

    def test_max_props_truncates(self):
        assert_config.format.max_props = 2
        assert format_value(assert_config, [1, 2, 3, 4]) == "[1,2,...]"

    def test_max_depth_elides(self):
        assert_config.format.max_format_depth = 2
        assert format_value(assert_config, [[[1]]]) == "[[...]]"

    def test_uses_global_config_when_none(self):
        assert format_value(None, "x") == '"x"'


class TestCircular:
    def test_self_referential_dict(self):
        value = {"name": "a"}
        value["self"] = value
        result = format_value(assert_config, value)
        assert result.startswith('{name:"a",self:')
        assert CIRCULAR_TEXT in result

    def test_self_referential_list(self):
        value = [1]
        value.append(value)
        assert CIRCULAR_TEXT in format_value(assert_config, value)

    def test_repeated_sibling_is_not_circular(self):
        shared = [1]
        assert format_value(assert_config, [shared, shared]) == "[[1],[1]]"

    def test_repeated_top_level_calls_are_independent(self):
        value = [1]
        value.append(value)
        first = format_value(assert_config, value)
        second = format_value(assert_config, value)
        assert first == second
        assert first.count(CIRCULAR_TEXT) == 1

    def test_separate_cyclic_values_do_not_interfere(self):
        a = {"name": "a"}
        a["self"] = a
        b = [a]
        b.append(b)
        assert format_value(assert_config, a) == format_value(assert_config, a)
        result = format_value(assert_config, b)
        assert result.startswith('[{name:"a",self:')
        assert result.count(CIRCULAR_TEXT) == 2

    def test_custom_circular_message(self):
        assert_config.circular_msg = lambda: "<loop>"
        value = []
        value.append(value)
        assert format_value(assert_config, value) == "[<loop>]"


class TestPipeline:
    def test_ok_short_circuits(self):
        calls = []

        def first(ctx, value):
            calls.append("first")
            return FormattedValue.ok("FIRST")

        def second(ctx, value):
            calls.append("second")
            return FormattedValue.ok("SECOND")

        assert_config.add_formatter([Formatter("first", first), Formatter("second", second)])
        assert format_value(assert_config, 1) == "FIRST"
        assert calls == ["first"]

    def test_continue_chains_into_next_formatter(self):
        def upper(ctx, value):
            if isinstance(value, str):
                return FormattedValue.cont(value.upper())
            return None

        def wrap(ctx, value):
            return FormattedValue.ok(f"<{value}>")

        assert_config.add_formatter([Formatter("upper", upper), Formatter("wrap", wrap)])
        assert format_value(assert_config, "abc") == "<ABC>"

    def test_final_continue_is_the_result(self):
        assert_config.add_formatter(Formatter("cont", lambda ctx, value: FormattedValue.cont("continued")))
        assert format_value(assert_config, 5) == "continued"

    def test_skip_and_none_fall_through_to_defaults(self):
        assert_config.add_formatter(
            [
                Formatter("skip", lambda ctx, value: FormattedValue.skip()),
                Formatter("none", lambda ctx, value: None),
            ]
        )
        assert format_value(assert_config, [1]) == "[1]"

    def test_failed_uses_defaults_for_original_value(self):
        assert_config.add_formatter(
            [
                Formatter("cont", lambda ctx, value: FormattedValue.cont("changed")),
                Formatter("fail", lambda ctx, value: FormattedValue.failed(ValueError("nope"))),
            ]
        )
        assert format_value(assert_config, "orig") == '"orig"'

    def test_raising_formatter_uses_defaults(self):
        def broken(ctx, value):
            raise RuntimeError("broken")

        assert_config.add_formatter(Formatter("broken", broken))
        assert format_value(assert_config, {"a": 1}) == "{a:1}"

    def test_nested_values_use_pipeline(self):
        def numbers(ctx, value):
            if isinstance(value, int):
                return FormattedValue.ok(f"#{value}")
            return FormattedValue.skip()

        assert_config.add_formatter(Formatter("numbers", numbers))
        assert format_value(assert_config, [1, 2]) == "[#1,#2]"

    def test_removable_handle(self):
        handle = assert_config.add_formatter(Formatter("x", lambda ctx, value: FormattedValue.ok("X")))
        assert format_value(assert_config, 1) == "X"
        handle.rm()
        handle.rm()
        assert format_value(assert_config, 1) == "1"


class TestFinalize:
    def test_escape_ansi(self):
        assert escape_ansi("\x1b[31mred\x1b[0m") == "\\x1b[31mred\\x1b[0m"
        assert escape_ansi("a\nb\tc") == "a\nb\tc"

    def test_finalize_off_leaves_output(self):
        assert format_value(assert_config, "\x1b") == '"\x1b"'

    def test_finalize_default_escapes(self):
        assert_config.format.finalize = True
        assert format_value(assert_config, "\x1b") == '"\\x1b"'

    def test_custom_finalize_fn(self):
        assert_config.format.finalize = True
        assert_config.format.finalize_fn = str.upper
        assert format_value(assert_config, "abc") == '"ABC"'


class TestFormatManager:
    def test_order_and_removal(self):
        mgr = FormatManager()
        a = Formatter("a", lambda ctx, value: None)
        b = Formatter("b", lambda ctx, value: None)
        mgr.add_formatter(a)
        handle = mgr.add_formatter(b)
        assert mgr.get_formatters() == (a, b)
        handle.rm()
        assert list(mgr) == [a]
        mgr.reset()
        assert len(mgr) == 0

    def test_result_values(self):
        assert FormattedValue.ok("x").res is FormatResult.OK
        assert FormattedValue.cont("x").res is FormatResult.CONTINUE
        assert FormattedValue.skip().res is FormatResult.SKIP
        assert FormattedValue.failed().res is FormatResult.FAILED
