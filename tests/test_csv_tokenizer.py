"""Tests for the quote-aware CSV tokenizer."""

import pytest

from shelftrack.library.csv_tokenizer import parse_csv_row, split_csv_lines, strip_bom


def test_strip_bom_removes_leading_mark():
    """Test that a leading byte-order mark is removed."""
    assert strip_bom("\ufeffTitle,Author") == "Title,Author"


def test_strip_bom_leaves_other_text_alone():
    """Test that text without a BOM, or with one later on, is unchanged."""
    assert strip_bom("Title,Author") == "Title,Author"
    assert strip_bom("a\ufeffb") == "a\ufeffb"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a,b\nc,d", ["a,b", "c,d"]),
        ("a,b\r\nc,d\r\n", ["a,b", "c,d"]),
        ("a,b\rc,d", ["a,b", "c,d"]),
        ("a\n\nb", ["a", "", "b"]),
        ("", []),
    ],
)
def test_split_csv_lines_unquoted_breaks(text, expected):
    """Test that unquoted line breaks of every style end a line."""
    assert split_csv_lines(text) == expected


def test_split_csv_lines_keeps_breaks_inside_quotes():
    """Test that line breaks inside quoted fields do not end the line."""
    text = '1,"first line\nsecond line",x\r\n2,"a\r\nb",y'

    lines = split_csv_lines(text)

    assert lines == ['1,"first line\nsecond line",x', '2,"a\r\nb",y']


def test_split_csv_lines_unterminated_quote_keeps_remainder():
    """Test that an unterminated quote swallows the rest of the input without hanging."""
    text = 'a,b\n"open field\nmore,text\nend'

    lines = split_csv_lines(text)

    assert lines == ["a,b", '"open field\nmore,text\nend']


def test_parse_csv_row_plain_fields():
    """Test splitting a row without quotes."""
    assert parse_csv_row("1,Dune,Frank Herbert,read") == ["1", "Dune", "Frank Herbert", "read"]


def test_parse_csv_row_quoted_comma_and_doubled_quotes():
    """Test that quoted commas and doubled quotes are unescaped."""
    row = '"Gone with the Wind, Vol. 1","She said ""hello""",x'

    assert parse_csv_row(row) == ["Gone with the Wind, Vol. 1", 'She said "hello"', "x"]


def test_parse_csv_row_empty_fields():
    """Test that empty and trailing empty fields are kept."""
    assert parse_csv_row(",a,,") == ["", "a", "", ""]
    assert parse_csv_row("") == [""]


def test_parse_csv_row_empty_quoted_field():
    """Test that a pair of quotes is an empty field."""
    assert parse_csv_row('"",b') == ["", "b"]


def test_parse_csv_row_unterminated_quote():
    """Test that an unterminated quoted field runs to the end of the line."""
    assert parse_csv_row('a,"b,c') == ["a", "b,c"]


def test_tokenize_multiline_quoted_field_end_to_end():
    """Test that a field spanning lines comes back with its line break intact."""
    lines = split_csv_lines('Title,Author\n"Multi\nline",Someone\n')

    assert [parse_csv_row(line) for line in lines] == [["Title", "Author"], ["Multi\nline", "Someone"]]
