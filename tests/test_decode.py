"""Tests for TOON decoder."""

import pytest

from toon_format import (
    DecodeOptions,
    InvalidEscapeError,
    ToonDecodeError,
    UnterminatedStringError,
    decode,
    decode_lines,
)


class TestPrimitives:
    """Test decoding of primitive values."""

    def test_null(self):
        assert decode("null") is None

    def test_true(self):
        assert decode("true") is True

    def test_false(self):
        assert decode("false") is False

    def test_integer(self):
        assert decode("42") == 42
        assert decode("-17") == -17

    def test_float(self):
        assert decode("3.14") == 3.14
        assert decode("-2.5") == -2.5

    def test_exponent_accepted(self):
        assert decode("1e3") == 1000.0
        assert decode("2.5E-2") == 0.025

    def test_unquoted_string(self):
        assert decode("hello") == "hello"
        assert decode("hello world") == "hello world"

    def test_quoted_string(self):
        assert decode('"hello"') == "hello"
        assert decode('"true"') == "true"
        assert decode('"123"') == "123"
        assert decode('""') == ""


class TestEmptyInput:
    """Test decoding of empty documents."""

    def test_empty_string(self):
        assert decode("") == {}

    def test_only_newlines(self):
        assert decode("\n\n") == {}

    def test_whitespace_only_non_strict(self):
        assert decode("   ", DecodeOptions(strict=False)) == {}


class TestObjects:
    """Test decoding of objects."""

    def test_simple_object(self):
        assert decode("name: Alice\nage: 30") == {"name": "Alice", "age": 30}

    def test_nested_object(self):
        result = decode("user:\n  name: Bob\n  role: admin")
        assert result == {"user": {"name": "Bob", "role": "admin"}}

    def test_empty_nested_object(self):
        assert decode("data:") == {"data": {}}

    def test_key_order_preserved(self):
        assert list(decode("b: 1\na: 2\nc: 3")) == ["b", "a", "c"]

    def test_quoted_key(self):
        assert decode('"key with spaces": value') == {"key with spaces": "value"}

    def test_quoted_key_with_colon(self):
        assert decode('"a:b": 1') == {"a:b": 1}

    def test_quoted_key_with_brackets(self):
        assert decode('"with[bracket]": 4') == {"with[bracket]": 4}

    def test_value_with_spaces(self):
        assert decode("msg: hello world") == {"msg": "hello world"}

    def test_value_with_colon_after_first(self):
        assert decode("url: http") == {"url": "http"}
        assert decode('url: "http://example.com"') == {"url": "http://example.com"}

    def test_trailing_spaces_ignored(self):
        assert decode("a: 1   \nb: 2") == {"a": 1, "b": 2}

    def test_crlf_line_endings(self):
        assert decode("a: 1\r\nb: x\r\n") == {"a": 1, "b": "x"}

    def test_deeply_nested(self):
        toon = "a:\n  b:\n    c:\n      d: deep"
        assert decode(toon) == {"a": {"b": {"c": {"d": "deep"}}}}

    def test_dedent_returns_to_parent(self):
        toon = "a:\n  b:\n    c: 1\n  d: 2\ne: 3"
        assert decode(toon) == {"a": {"b": {"c": 1}, "d": 2}, "e": 3}


class TestNumbers:
    """Test number parsing rules."""

    def test_negative_zero(self):
        assert decode("value: -0") == {"value": 0}

    def test_negative_zero_float(self):
        assert decode("value: -0.0") == {"value": 0.0}

    def test_leading_zeros_string(self):
        assert decode("id: 007") == {"id": "007"}

    def test_leading_zero_fractions_are_strings(self):
        assert decode("[3]: 00.5,-01,0.5") == ["00.5", "-01", 0.5]

    def test_int_and_float_types(self):
        result = decode("a: 5\nb: 5.0")
        assert isinstance(result["a"], int)
        assert isinstance(result["b"], float)

    def test_number_like_strings(self):
        assert decode("v: 1.2.3") == {"v": "1.2.3"}
        assert decode("v: 12abc") == {"v": "12abc"}


class TestArraysInline:
    """Test inline primitive array decoding."""

    def test_string_array(self):
        assert decode("tags[3]: a,b,c") == {"tags": ["a", "b", "c"]}

    def test_number_array(self):
        assert decode("nums[3]: 1,2,3") == {"nums": [1, 2, 3]}

    def test_mixed_primitives(self):
        assert decode("mix[4]: 1,two,true,null") == {"mix": [1, "two", True, None]}

    def test_empty_array(self):
        assert decode("items[0]:") == {"items": []}

    def test_quoted_values(self):
        assert decode('items[2]: "a,b",c') == {"items": ["a,b", "c"]}

    def test_spaces_around_values(self):
        assert decode("items[3]: a , b , c") == {"items": ["a", "b", "c"]}

    def test_empty_tokens(self):
        assert decode("items[3]: a,,c") == {"items": ["a", "", "c"]}


class TestArraysTabular:
    """Test tabular array decoding."""

    def test_simple_tabular(self):
        toon = "users[2]{id,name}:\n  1,Alice\n  2,Bob"
        assert decode(toon) == {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]}

    def test_tabular_followed_by_field(self):
        toon = "users[1]{id,name}:\n  1,Alice\ncount: 1"
        assert decode(toon) == {"users": [{"id": 1, "name": "Alice"}], "count": 1}

    def test_tabular_with_quoted_values(self):
        toon = 'data[2]{key}:\n  "a,b"\n  "c:d"'
        assert decode(toon) == {"data": [{"key": "a,b"}, {"key": "c:d"}]}

    def test_quoted_field_names(self):
        assert decode('[1]{"first name",id}:\n  A,1') == [{"first name": "A", "id": 1}]

    def test_inline_tabular_row_major(self):
        assert decode("[2]{a,b}: 1,2,3,4") == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]

    def test_row_with_colon_in_quotes(self):
        toon = 'rows[1]{t,v}:\n  "12:30",x'
        assert decode(toon) == {"rows": [{"t": "12:30", "v": "x"}]}

    def test_sibling_field_ends_rows_in_list_item(self):
        toon = "items[1]:\n  - rows[1]{a}:\n      1\n    name: x"
        assert decode(toon) == {"items": [{"rows": [{"a": 1}], "name": "x"}]}


class TestArraysList:
    """Test list format array decoding."""

    def test_nested_object_list(self):
        toon = "items[2]:\n  - a:\n      b: 1\n  - a:\n      b: 2"
        assert decode(toon) == {"items": [{"a": {"b": 1}}, {"a": {"b": 2}}]}

    def test_mixed_types(self):
        toon = "items[3]:\n  - 1\n  - x: 2\n  - three"
        assert decode(toon) == {"items": [1, {"x": 2}, "three"]}

    def test_object_item_with_more_fields(self):
        toon = "items[1]:\n  - id: 1\n    name: a\n    tags[2]: x,y"
        assert decode(toon) == {"items": [{"id": 1, "name": "a", "tags": ["x", "y"]}]}

    def test_empty_object_in_list(self):
        assert decode("items[1]:\n  -") == {"items": [{}]}

    def test_bare_hyphen_object(self):
        toon = "items[1]:\n  -\n    tags[2]: a,b\n    name: x"
        assert decode(toon) == {"items": [{"tags": ["a", "b"], "name": "x"}]}

    def test_array_of_arrays(self):
        toon = "matrix[2]:\n  - [2]: 1,2\n  - [2]: 3,4"
        assert decode(toon) == {"matrix": [[1, 2], [3, 4]]}

    def test_empty_inner_array(self):
        assert decode("pairs[2]:\n  - [0]:\n  - [1]: 1") == {"pairs": [[], [1]]}

    def test_keyed_tabular_on_hyphen_line(self):
        toon = "items[1]:\n  - users[2]{id}:\n      1\n      2\n    name: x"
        assert decode(toon) == {"items": [{"users": [{"id": 1}, {"id": 2}], "name": "x"}]}

    def test_keyed_list_body_at_depth_plus_one(self):
        toon = "items[1]:\n  - tags[2]:\n    - a\n    - b"
        assert decode(toon) == {"items": [{"tags": ["a", "b"]}]}

    def test_nested_list_of_lists(self):
        toon = "[1]:\n  - [2]:\n    - x: 1\n    - 2"
        assert decode(toon) == [[{"x": 1}, 2]]

    def test_string_starting_with_hyphen_quoted(self):
        assert decode('items[1]:\n  - "- x"') == {"items": ["- x"]}


class TestRootForms:
    """Test root form detection."""

    def test_root_inline_array(self):
        assert decode("[3]: 1,2,3") == [1, 2, 3]

    def test_root_empty_array(self):
        assert decode("[0]:") == []

    def test_root_tabular(self):
        assert decode("[2]{a}:\n  1\n  2") == [{"a": 1}, {"a": 2}]

    def test_root_list(self):
        assert decode("[2]:\n  - a\n  - b: 1") == ["a", {"b": 1}]

    def test_root_primitive(self):
        assert decode("hello") == "hello"

    def test_root_object_starting_with_keyed_array(self):
        assert decode("a[1]: x\nb: 2") == {"a": ["x"], "b": 2}


class TestDelimiters:
    """Test delimiter detection from headers."""

    def test_tab_delimiter(self):
        assert decode("items[3\t]: 1\t2\t3") == {"items": [1, 2, 3]}

    def test_pipe_delimiter(self):
        assert decode("items[3|]: 1|2|3") == {"items": [1, 2, 3]}

    def test_tabular_tab(self):
        toon = "users[2\t]{id\tname}:\n  1\tAlice\n  2\tBob"
        assert decode(toon) == {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]}

    def test_tabular_pipe(self):
        toon = "users[1|]{id|name}:\n  1|a,b"
        assert decode(toon) == {"users": [{"id": 1, "name": "a,b"}]}

    def test_comma_is_data_under_pipe(self):
        assert decode("items[2|]: a,b|c") == {"items": ["a,b", "c"]}

    def test_nested_header_uses_own_delimiter(self):
        toon = "outer[1|]:\n  - inner[2]: a,b"
        assert decode(toon) == {"outer": [{"inner": ["a", "b"]}]}


class TestEscapeSequences:
    """Test escape sequence decoding."""

    def test_all_valid_escapes(self):
        assert decode(r'v: "a\\b\"c\nd\re\tf"') == {"v": 'a\\b"c\nd\re\tf'}

    def test_invalid_escape(self):
        with pytest.raises(InvalidEscapeError, match="Invalid escape"):
            decode('key: "bad\\x"')

    def test_invalid_escape_root(self):
        with pytest.raises(InvalidEscapeError):
            decode('"hello\\x"')

    def test_backslash_at_end(self):
        with pytest.raises(UnterminatedStringError):
            decode('key: "trailing\\"')

    def test_unicode_escape_rejected(self):
        with pytest.raises(InvalidEscapeError):
            decode('v: "\\u0041"')


class TestOptions:
    """Test decode options."""

    def test_custom_indent(self):
        assert decode("parent:\n    child: value", DecodeOptions(indent=4)) == {
            "parent": {"child": "value"}
        }

    def test_decode_lines(self):
        assert decode_lines(["a:", "  b: 1"]) == {"a": {"b": 1}}

    def test_decode_lines_accepts_generator(self):
        lines = (line for line in ["[2]:", "  - x", "  - y"])
        assert decode_lines(lines) == ["x", "y"]


class TestErrors:
    """Test error reporting."""

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            decode("[2]: 1")

    def test_line_number_reported(self):
        with pytest.raises(ToonDecodeError) as exc_info:
            decode('a: 1\nb: "x\\q"')
        assert exc_info.value.line_number == 2
        assert str(exc_info.value).startswith("Line 2:")
