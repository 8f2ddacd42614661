"""
core/line_parser.py — Line-oriented delimited text parsing for imports.

Turns raw text into a lazy sequence of ParsedRow objects, one per non-blank
line. The first non-blank line is treated as a header when any of its tokens contains an expected
field name or header alias; otherwise every line is data and fields are
read from their default column positions.

Two splitting modes:
  - parse_lines():   quote-aware split (csv module), for multi-column data
  - parse_triples(): first/second delimiter only, for "brand,name,hex" lists

Lines that cannot yield enough fields come back as error rows so the caller
can count them and keep going. The generators are single-pass.
"""

import csv
import io
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_token(token: str) -> str:
    """'Color Name', 'color_name' and 'colorName' all become 'colorname'."""
    return _NON_ALNUM.sub("", token.strip().lower())


@dataclass(frozen=True)
class Field:
    """An expected column: its name, fallback position and aliases.

    ``aliases`` both mark a header line and bind a column. ``bind_aliases``
    only bind: they are words that also turn up in ordinary data cells
    ("Location A", "BrandX"), so they must not make a data line a header.
    """
    name: str
    position: int
    aliases: tuple = ()
    bind_aliases: tuple = ()

    @property
    def header_keys(self) -> tuple:
        return tuple(normalize_token(k) for k in (self.name, *self.aliases))

    @property
    def keys(self) -> tuple:
        return self.header_keys + tuple(normalize_token(k) for k in self.bind_aliases)


@dataclass
class ParsedRow:
    line_number: int
    values: dict
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def split_quoted(line: str, delimiter: str = ",") -> list[str]:
    """Split one line, honouring "..." fields that contain the delimiter."""
    cells = next(csv.reader([line], delimiter=delimiter, skipinitialspace=True), [])
    return [c.strip() for c in cells]


def _unquote(cell: str) -> str:
    return cell.strip().replace('"', "")


def split_triple(line: str, delimiter: str = ",") -> Optional[list[str]]:
    """Split on the first two delimiters only.

    "Brand,Color,#hex" -> [brand, color, hex]; "Color,#hex" -> ["", color, hex].
    Returns None when the line holds no delimiter at all.
    """
    first = line.find(delimiter)
    if first == -1:
        return None
    second = line.find(delimiter, first + 1)
    if second == -1:
        return ["", _unquote(line[:first]), _unquote(line[first + 1:])]
    return [
        _unquote(line[:first]),
        _unquote(line[first + 1:second]),
        _unquote(line[second + 1:]),
    ]


def is_header(tokens: Sequence[str], fields: Sequence[Field]) -> bool:
    """True when any token contains an expected field name or header alias."""
    normalized = [normalize_token(t) for t in tokens]
    return any(
        key and key in token
        for token in normalized
        for field in fields
        for key in field.header_keys
    )


def bind_columns(header: Sequence[str], fields: Sequence[Field]) -> dict[str, int]:
    """Map each field to a header column.

    Exact matches win over substring matches; fields the header does not
    mention keep their default position.
    """
    normalized = [normalize_token(h) for h in header]
    columns = {}
    for field in fields:
        index = next(
            (i for i, token in enumerate(normalized) if token in field.keys),
            None,
        )
        if index is None:
            index = next(
                (i for i, token in enumerate(normalized)
                 if any(key and key in token for key in field.keys)),
                None,
            )
        columns[field.name] = field.position if index is None else index
    return columns


def _lines(text: str) -> Iterator[tuple[int, str]]:
    for number, raw in enumerate(io.StringIO(text), start=1):
        line = raw.strip()
        if line:
            yield number, line


def parse_lines(
    text: str,
    fields: Sequence[Field],
    delimiter: str = ",",
    min_columns: int = 1,
) -> Iterator[ParsedRow]:
    """Quote-aware parse of delimited text into rows keyed by field name."""
    default_columns = {f.name: f.position for f in fields}
    columns = None
    first = True

    for number, line in _lines(text):
        try:
            cells = split_quoted(line, delimiter)
        except csv.Error as exc:
            first = False
            yield ParsedRow(number, {}, f"unparseable line: {exc}")
            continue

        if first:
            first = False
            if is_header(cells, fields):
                columns = bind_columns(cells, fields)
                continue

        if len(cells) < min_columns:
            yield ParsedRow(number, {}, f"expected at least {min_columns} fields, got {len(cells)}")
            continue

        positions = columns or default_columns
        values = {
            name: cells[index] if index < len(cells) else ""
            for name, index in positions.items()
        }
        yield ParsedRow(number, values)


def parse_triples(
    text: str,
    fields: Sequence[Field],
    delimiter: str = ",",
) -> Iterator[ParsedRow]:
    """Parse "a,b,c" lines with the two-delimiter split.

    ``fields`` must hold exactly three entries; their positions (0, 1, 2)
    pick which part of the split each one receives. A header line is
    skipped but never used for column binding.
    """
    if len(fields) != 3:
        raise ValueError("parse_triples needs exactly three fields")
    first = True

    for number, line in _lines(text):
        if first:
            first = False
            if is_header(line.split(delimiter), fields):
                continue

        parts = split_triple(line, delimiter)
        if parts is None:
            yield ParsedRow(number, {}, "no delimiter found")
            continue
        yield ParsedRow(number, {f.name: parts[f.position] for f in fields})
