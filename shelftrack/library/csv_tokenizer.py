"""Quote-aware CSV tokenizing for catalog exports.

Goodreads exports are RFC-4180 style: fields may be wrapped in double quotes,
quoted fields may contain commas and line breaks, and a literal quote inside a
quoted field is written as two quotes.
"""

import logging

logger = logging.getLogger(__name__)

BOM = "\ufeff"
QUOTE = '"'
DELIMITER = ","


def strip_bom(text: str) -> str:
    """Remove a leading byte-order mark, if present."""
    if text.startswith(BOM):
        logger.debug("Removing BOM from CSV text.")
        return text[len(BOM) :]
    return text


def split_csv_lines(text: str) -> list[str]:
    """Split CSV text into logical lines.

    Line breaks inside quoted fields belong to the field and do not end the
    line. ``\\r\\n`` counts as a single break. Quote characters are kept in the
    returned lines so that :func:`parse_csv_row` can apply the same rules.
    An unterminated quote keeps the rest of the text in the current line.

    Args:
        text: Raw CSV text (BOM already stripped)

    Returns:
        List of logical line strings, possibly including blank ones
    """
    lines: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        if ch == QUOTE:
            in_quotes = not in_quotes
            current.append(ch)
        elif ch in ("\n", "\r") and not in_quotes:
            if ch == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
            lines.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    if current:
        lines.append("".join(current))

    if in_quotes:
        logger.debug("CSV text ended inside a quoted field; treating the remainder as quoted.")

    logger.debug("Split CSV text into %d logical lines.", len(lines))
    return lines


def parse_csv_row(line: str) -> list[str]:
    """Split a single logical CSV line into field values.

    Args:
        line: One line produced by :func:`split_csv_lines`

    Returns:
        Unescaped field values in column order
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        ch = line[i]
        if in_quotes:
            if ch == QUOTE:
                if i + 1 < length and line[i + 1] == QUOTE:
                    current.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                current.append(ch)
        elif ch == QUOTE:
            in_quotes = True
        elif ch == DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields
