import math

import pytest

from mosh import GrammarError
from mosh.msh import _grammar as g


@pytest.mark.parametrize(
    "text, expected",
    [
        (b"0.", 0.0),
        (b"1", 1.0),
        (b"-1.5e-3", -1.5e-3),
        (b"+2E10", 2.0e10),
        (b".5", 0.5),
        (b"12345.678901234567", 12345.678901234567),
    ],
)
def test_double(text, expected):
    value, pos = g.double(text + b" rest", 0)
    assert value == expected
    assert pos == len(text)


def test_double_special_values():
    assert math.isinf(g.double(b"-inf", 0)[0])
    assert math.isnan(g.double(b"nan", 0)[0])


def test_double_rejects_text():
    with pytest.raises(GrammarError):
        g.double(b"x1.0", 0)


def test_uint():
    assert g.uint(b"100 1", 0) == (100, 3)
    assert g.uint(b"18446744073709551615", 0)[0] == 2**64 - 1
    with pytest.raises(GrammarError):
        g.uint(b"-1", 0)
    with pytest.raises(GrammarError, match="64 bits"):
        g.uint(b"18446744073709551616", 0)


@pytest.mark.parametrize("text", [b"\n", b"\r\n", b"  \t\n", b"", b"   "])
def test_end_of_line(text):
    assert g.end_of_line(text, 0) == len(text)


def test_end_of_line_not_in_middle_of_line():
    with pytest.raises(GrammarError, match="end of line"):
        g.end_of_line(b"  x\n", 0)


def test_quoted():
    name, pos = g.quoted(b'"Water-cube 2" tail', 0)
    assert name == "Water-cube 2"
    assert pos == 14
    with pytest.raises(GrammarError):
        g.quoted(b'"unterminated\n"', 0)


def test_tag_line_and_lookahead():
    buf = b"$Nodes  \n3\n"
    assert g.at_tag_line(buf, 0, b"$Nodes")
    assert not g.at_tag_line(b"$NodeData\n", 0, b"$Nodes")
    assert not g.at_tag_line(b"$Nodes x\n", 0, b"$Nodes")
    assert g.tag_line(buf, 0, b"$Nodes") == 9


def test_error_location():
    buf = b"1 2\n3 x\n"
    with pytest.raises(GrammarError) as excinfo:
        g.uint(buf, 6)
    err = excinfo.value
    assert err.position == 6
    assert err.lineno == 2
    assert err.span == b"x"
    assert "line 2" in str(err)
