"""
Minimal delimited-text parser for the machine CSV exports.

A double quote toggles the "inside quotes" state and is not kept in the
field value. There is no escaped-quote handling: a stray quote in a field
flips the state and can merge the following fields. This is the same
permissive reading the exports have always had, so it is kept as-is.
"""

import logging

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'


def parse_csv_line(line: str, delimiter: str = DELIMITER) -> list[str]:
    """Split one line into trimmed fields, honouring quoted spans."""
    values = []
    current = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    values.append("".join(current).strip())
    return values


def parse_csv(text: str, delimiter: str = DELIMITER) -> list[list[str]]:
    """Parse a whole document into rows of string fields.

    No column-count validation is done; short and long rows are returned
    as they are. A blank document gives no rows at all.
    """
    stripped = text.strip()
    if not stripped:
        return []

    rows = [parse_csv_line(line, delimiter) for line in stripped.split("\n")]
    logger.debug("Parsed %d CSV rows", len(rows))
    return rows
