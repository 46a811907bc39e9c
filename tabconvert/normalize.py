"""
Core normalization logic.

Turns JSON, XML and CSV documents of unknown shape into one canonical table:
an ordered header row plus string rows aligned to it.

Responsibilities:
- JSON array/object -> table (header union, missing keys -> "")
- XML document -> flat records -> table
- value formatting (numbers, nulls, dates)
- CSV decoding + row width enforcement (bypass path)

Header order is first-seen order across the records, in document order.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import math
import xml.etree.ElementTree as ET
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple

from charset_normalizer import from_bytes

from .dates import normalize_date
from .errors import EmptyInput, InvalidStructure, MalformedInput, UnsupportedFormat
from .rules import INPUT_FORMATS, NORMALIZED_DELIMITER

log = logging.getLogger("tabconvert.normalize")


class Table(NamedTuple):
    headers: List[str]
    rows: List[List[str]]

    @property
    def columns(self) -> int:
        return len(self.headers)

    def records(self) -> List[List[str]]:
        """Header row followed by the data rows."""
        return [list(self.headers)] + [list(r) for r in self.rows]


# --- value formatting ---

def _format_number(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        return str(value)
    if value.is_integer():
        return str(int(value))
    # repr() is the shortest round-tripping form; Decimal drops the exponent
    return format(Decimal(repr(value)), "f")


def format_value(value: Any) -> str:
    """Render one decoded scalar as a display string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return normalize_date(value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def _build_table(records: Iterable[Mapping[str, Any]]) -> Table:
    records = list(records)

    headers: Dict[str, None] = {}
    for rec in records:
        for key in rec:
            headers.setdefault(key, None)
    header_row = list(headers)

    rows = []
    for rec in records:
        rows.append([format_value(rec[h]) if h in rec else "" for h in header_row])

    return Table(header_row, rows)


# --- JSON ---

def parse_json(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise MalformedInput(f"invalid JSON: {e}") from e


def json_to_table(value: Any) -> Table:
    """
    Convert a decoded JSON value to a table.

    Accepts a single object (one row) or an array of objects.

    Raises:
        InvalidStructure: top level is a scalar, or an element is not an object.
        EmptyInput: the array is empty.
    """
    if isinstance(value, dict):
        items = [value]
    elif isinstance(value, list):
        items = value
    else:
        raise InvalidStructure(f"invalid JSON structure: top level is {type(value).__name__}")

    if not items:
        raise EmptyInput("empty JSON array")

    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidStructure(
                f"expected JSON array of objects, element {i} is {type(item).__name__}"
            )

    table = _build_table(items)
    log.debug("json -> %d rows x %d columns", len(table.rows), table.columns)
    return table


# --- XML ---

def _local_name(name: str) -> str:
    # ElementTree spells namespaced names as "{uri}local"
    return name.rsplit("}", 1)[-1]


def flatten_element(element: ET.Element) -> Dict[str, str]:
    """
    Collapse one element subtree into a single-level mapping.

    - attributes are stored under their local name
    - a leaf stores its stripped text (if any) under its local tag name
    - a container recurses into its children; its own text is dropped

    Name collisions are last-write-wins in traversal order: attributes
    first, then children in document order.
    """
    record = {_local_name(k): v for k, v in element.attrib.items()}

    children = list(element)
    if not children:
        text = (element.text or "").strip()
        if text:
            record[_local_name(element.tag)] = text
        return record

    for child in children:
        record.update(flatten_element(child))
    return record


def parse_xml(raw: bytes) -> List[Dict[str, str]]:
    """
    Parse XML bytes into flat records.

    If some tag occurs more than once among the root's children, the first
    such group (by first appearance) is the record list and every other
    child is ignored. Otherwise the whole document is one record.

    Raises:
        MalformedInput: the document does not parse.
    """
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as e:
        raise MalformedInput(f"invalid XML: {e}") from e

    groups: Dict[str, List[ET.Element]] = {}
    for child in root:
        groups.setdefault(_local_name(child.tag), []).append(child)

    for tag, nodes in groups.items():
        if len(nodes) > 1:
            log.debug("xml: repeated element <%s> x%d used as rows", tag, len(nodes))
            return [flatten_element(n) for n in nodes]

    log.debug("xml: no repeated element under <%s>, whole document is one row", _local_name(root.tag))
    return [flatten_element(root)]


def xml_to_table(raw: bytes) -> Table:
    """
    Convert XML bytes to a table.

    Raises:
        MalformedInput, EmptyInput
    """
    records = parse_xml(raw)
    if not records:
        raise EmptyInput("no XML data found")
    return _build_table(records)


# --- CSV (already tabular) ---

def decode_text(raw: bytes) -> str:
    """
    Decode input bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is consumed, never kept as content.
    - If decode fails, try UTF-8, then UTF-8 with replacement characters.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        log.warning("decode with %s failed, falling back to utf-8", decode_used)
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Last resort: decode with replacement so the conversion can continue
        log.warning("input is not valid utf-8, undecodable bytes replaced")
        return raw.decode("utf-8-sig", errors="replace")


def parse_csv(raw: bytes) -> Table:
    """
    Parse CSV bytes; the first record is the header.

    Short rows are padded with "" (and reported as a warning), rows longer
    than the header are rejected.

    Raises:
        EmptyInput: no header row.
        MalformedInput: a row is wider than the header or the CSV is unreadable.
    """
    text = decode_text(raw)
    reader = csv.reader(
        io.StringIO(text, newline=""),
        delimiter=NORMALIZED_DELIMITER,
        skipinitialspace=True,
    )
    try:
        records = [row for row in reader if row]
    except csv.Error as e:
        raise MalformedInput(f"invalid CSV: {e}") from e

    if not records:
        raise EmptyInput("empty CSV document")

    headers, body = records[0], records[1:]
    width = len(headers)

    rows = []
    for i, row in enumerate(body, start=2):
        if len(row) > width:
            raise MalformedInput(f"record {i}: expected {width} fields, got {len(row)}")
        if len(row) < width:
            log.warning("record %d: %d fields, padded to %d", i, len(row), width)
            row = row + [""] * (width - len(row))
        rows.append(row)

    return Table(headers, rows)


def convert_bytes(raw: bytes, input_format: str) -> Table:
    """Dispatch raw document bytes to the parser for ``input_format``."""
    fmt = input_format.strip().lower()
    if fmt == "csv":
        return parse_csv(raw)
    if fmt == "json":
        return json_to_table(parse_json(raw))
    if fmt == "xml":
        return xml_to_table(raw)
    raise UnsupportedFormat(
        f"unsupported input format: {input_format!r} (expected one of {', '.join(INPUT_FORMATS)})"
    )
