from __future__ import annotations

import pytest

from canonjson.errors import InvalidNumberLiteral, ProtocolViolation, UnsupportedFloat
from canonjson.escapes import AsciiControl, CharEscape
from canonjson.formatter import CanonicalFormatter
from canonjson.protocols import Formatter, Sink
from canonjson.sinks import BytesSink


def test_formatter_and_sink_satisfy_protocols() -> None:
    assert isinstance(CanonicalFormatter(), Formatter)
    assert isinstance(BytesSink(), Sink)


# -----------------------------------------------------------------------------
# Routing
# -----------------------------------------------------------------------------


def test_top_level_scalars_go_straight_to_sink(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.write_u8(sink, 7)
    assert sink.getvalue() == b"7"


def test_object_bytes_are_held_until_close(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("b", first=True)
    fmt.write_bool(sink, True)
    feed.end_value()
    assert feed.output() == b""
    assert fmt.depth == 1

    fmt.end_object(sink)
    assert feed.output() == b'{"b":true}'
    assert fmt.depth == 0


def test_members_sorted_by_key(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("c", first=True)
    fmt.write_i64(sink, 120)
    feed.end_value()
    feed.key("b")
    fmt.write_bool(sink, False)
    feed.end_value()
    feed.key("a")
    feed.string("Hello!")
    feed.end_value()
    fmt.end_object(sink)

    assert feed.output() == b'{"a":"Hello!","b":false,"c":120}'


def test_nested_objects_sort_locally(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("z", first=True)
    fmt.begin_object(sink)
    feed.key("y", first=True)
    fmt.write_null(sink)
    feed.end_value()
    feed.key("x")
    fmt.write_null(sink)
    feed.end_value()
    fmt.end_object(sink)
    feed.end_value()
    feed.key("a")
    fmt.write_u8(sink, 1)
    feed.end_value()
    fmt.end_object(sink)

    assert feed.output() == b'{"a":1,"z":{"x":null,"y":null}}'


def test_array_order_is_preserved_inside_object(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("e", first=True)
    fmt.begin_array(sink)
    for index, number in enumerate([2, 4, 19, -128]):
        fmt.begin_array_value(sink, index == 0)
        fmt.write_i8(sink, number)
        fmt.end_array_value(sink)
    fmt.end_array(sink)
    feed.end_value()
    fmt.end_object(sink)

    assert feed.output() == b'{"e":[2,4,19,-128]}'


def test_objects_inside_top_level_array(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_array(sink)
    for index, name in enumerate(["b", "a"]):
        fmt.begin_array_value(sink, index == 0)
        fmt.begin_object(sink)
        feed.key(name, first=True)
        fmt.write_u8(sink, index)
        feed.end_value()
        feed.key("0")
        fmt.write_null(sink)
        feed.end_value()
        fmt.end_object(sink)
        fmt.end_array_value(sink)
    fmt.end_array(sink)

    assert feed.output() == b'[{"0":null,"b":0},{"0":null,"a":1}]'


def test_keys_compare_as_escaped_bytes(feed) -> None:
    # Logically '"' (0x22) < 'A' (0x41), but the emitted key carries '\' (0x5c).
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key('a"', first=True)
    fmt.write_u8(sink, 1)
    feed.end_value()
    feed.key("aA")
    fmt.write_u8(sink, 2)
    feed.end_value()
    fmt.end_object(sink)

    assert feed.output() == b'{"aA":2,"a\\"":1}'


def test_duplicate_keys_keep_event_order(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("k", first=True)
    fmt.write_u8(sink, 2)
    feed.end_value()
    feed.key("k")
    fmt.write_u8(sink, 1)
    feed.end_value()
    fmt.end_object(sink)

    assert feed.output() == b'{"k":2,"k":1}'


def test_empty_object_and_array(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_array(sink)
    fmt.begin_array_value(sink, True)
    fmt.begin_object(sink)
    fmt.end_object(sink)
    fmt.end_array_value(sink)
    fmt.begin_array_value(sink, False)
    fmt.begin_array(sink)
    fmt.end_array(sink)
    fmt.end_array_value(sink)
    fmt.end_array(sink)

    assert feed.output() == b"[{},[]]"


def test_raw_fragment_passes_through(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("raw", first=True)
    fmt.write_raw_fragment(sink, '{"already":"canonical"}')
    feed.end_value()
    fmt.end_object(sink)

    assert feed.output() == b'{"raw":{"already":"canonical"}}'


# -----------------------------------------------------------------------------
# Strings
# -----------------------------------------------------------------------------


def test_quote_is_the_only_escaped_character_besides_backslash(feed) -> None:
    feed.string('Hello, "Canonical"')
    assert feed.output() == b'"Hello, \\"Canonical\\""'


def test_control_bytes_are_emitted_raw(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.begin_string(sink)
    formatter.write_char_escape(sink, AsciiControl(0x01))
    formatter.write_char_escape(sink, CharEscape.LINE_FEED)
    formatter.write_char_escape(sink, CharEscape.TAB)
    formatter.write_char_escape(sink, CharEscape.SOLIDUS)
    formatter.write_char_escape(sink, CharEscape.REVERSE_SOLIDUS)
    formatter.end_string(sink)

    assert sink.getvalue() == b'"\x01\n\t/\\\\"'


def test_unicode_fragments_are_utf8(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.begin_string(sink)
    formatter.write_string_fragment(sink, "Ångström")
    formatter.end_string(sink)

    assert sink.getvalue() == '"Ångström"'.encode("utf-8")


# -----------------------------------------------------------------------------
# Numbers
# -----------------------------------------------------------------------------


@pytest.mark.parametrize("method", ["write_f32", "write_f64"])
@pytest.mark.parametrize("value", [0.0, 1.5, -2.25, float("nan")])
def test_float_writes_always_fail(
    formatter: CanonicalFormatter, sink: BytesSink, method: str, value: float
) -> None:
    with pytest.raises(UnsupportedFloat, match="forbidden"):
        getattr(formatter, method)(sink, value)
    assert sink.getvalue() == b""


def test_number_text_is_validated(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.write_number_str(sink, "-42")
    assert sink.getvalue() == b"-42"

    with pytest.raises(InvalidNumberLiteral):
        formatter.write_number_str(sink, "1.0")


def test_integer_widths_render_extremes(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.begin_array(sink)
    formatter.begin_array_value(sink, True)
    formatter.write_i8(sink, -128)
    formatter.begin_array_value(sink, False)
    formatter.write_u16(sink, 65535)
    formatter.begin_array_value(sink, False)
    formatter.write_i128(sink, -(2**127))
    formatter.begin_array_value(sink, False)
    formatter.write_u128(sink, 2**128 - 1)
    formatter.end_array(sink)

    expected = f"[-128,65535,{-(2**127)},{2**128 - 1}]".encode("ascii")
    assert sink.getvalue() == expected


@pytest.mark.parametrize(
    ("method", "value"),
    [
        ("write_i8", 128),
        ("write_i16", -32769),
        ("write_u8", -1),
        ("write_u32", 2**32),
        ("write_u64", 2**64),
        ("write_i64", True),
    ],
)
def test_integer_out_of_width_is_a_protocol_violation(
    formatter: CanonicalFormatter, sink: BytesSink, method: str, value: int
) -> None:
    with pytest.raises(ProtocolViolation):
        getattr(formatter, method)(sink, value)


# -----------------------------------------------------------------------------
# Protocol violations
# -----------------------------------------------------------------------------


def test_end_object_with_empty_stack(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    with pytest.raises(ProtocolViolation, match="object is not active"):
        formatter.end_object(sink)


def test_key_without_object(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    with pytest.raises(ProtocolViolation, match="object is not active"):
        formatter.begin_object_key(sink, True)
    with pytest.raises(ProtocolViolation, match="object is not active"):
        formatter.end_object_key(sink)


def test_end_key_without_member(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.begin_object(sink)
    with pytest.raises(ProtocolViolation, match="member is not active"):
        formatter.end_object_key(sink)


def test_value_written_before_any_key(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.begin_object(sink)
    with pytest.raises(ProtocolViolation, match="member is not active"):
        formatter.write_null(sink)


def test_finish_reports_unclosed_objects(feed) -> None:
    fmt, sink = feed.formatter, feed.sink
    fmt.begin_object(sink)
    feed.key("a", first=True)
    fmt.begin_object(sink)

    with pytest.raises(ProtocolViolation, match="2 open object"):
        fmt.finish()


def test_finish_after_balanced_stream(formatter: CanonicalFormatter, sink: BytesSink) -> None:
    formatter.begin_object(sink)
    formatter.end_object(sink)
    formatter.finish()
    assert sink.getvalue() == b"{}"
