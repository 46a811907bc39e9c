"""
Serializers for the canonical table.

Every renderer takes a Table and returns the encoded file contents;
``save`` picks the renderer from the output file extension.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, List
from xml.sax.saxutils import escape

from .errors import EmptyInput, UnsupportedFormat
from .normalize import Table
from .rules import NORMALIZED_DELIMITER, OUTPUT_EXTENSIONS, TARGET_ENCODING

log = logging.getLogger("tabconvert.writers")

Renderer = Callable[[Table], bytes]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

EXCEL_HEADER = """<?xml version="1.0"?>
<?mso-application progid="Excel.Sheet"?>
<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet"
 xmlns:o="urn:schemas-microsoft-com:office:office"
 xmlns:x="urn:schemas-microsoft-com:office:excel"
 xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet"
 xmlns:html="http://www.w3.org/TR/REC-html40">
 <Worksheet ss:Name="Sheet1">
  <Table>
"""
EXCEL_FOOTER = """  </Table>
 </Worksheet>
</Workbook>"""

_XML_ENTITIES = {"'": "&apos;", '"': "&quot;"}
_INVALID_NAME_CHARS = re.compile(r"[^\w.\-]")


def _require_data(table: Table) -> None:
    if not table.headers:
        raise EmptyInput("no data to save")


def _as_objects(table: Table) -> List[Dict[str, str]]:
    return [
        {h: row[i] for i, h in enumerate(table.headers) if i < len(row)}
        for row in table.rows
    ]


def escape_xml(text: str) -> str:
    """Escape & < > ' and " for XML content."""
    return escape(text, _XML_ENTITIES)


def xml_name(field: str) -> str:
    """Coerce a header into a usable XML element name."""
    name = _INVALID_NAME_CHARS.sub("_", field)
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = "_" + name
    return name


def xml_names(headers: List[str]) -> List[str]:
    """Element names for ``headers``, made unique with a numeric suffix (a_b, a_b_2, ...)."""
    names: List[str] = []
    taken = set()
    for field in headers:
        base = name = xml_name(field)
        n = 1
        while name in taken:
            n += 1
            name = f"{base}_{n}"
        taken.add(name)
        names.append(name)
    return names


def render_csv(table: Table) -> bytes:
    _require_data(table)
    out = io.StringIO(newline="")
    # every field quoted: leading blanks and bare \r survive a read back
    writer = csv.writer(
        out, delimiter=NORMALIZED_DELIMITER, lineterminator="\n", quoting=csv.QUOTE_ALL
    )
    writer.writerows(table.records())
    return out.getvalue().encode(TARGET_ENCODING)


def render_json(table: Table) -> bytes:
    _require_data(table)
    return json.dumps(_as_objects(table), indent=2, ensure_ascii=False).encode("utf-8")


def render_flat_xml(table: Table) -> bytes:
    """<Rows><Row><field>value</field>...</Row>...</Rows>"""
    _require_data(table)
    names = xml_names(table.headers)

    root = ET.Element("Rows")
    for row in table.rows:
        row_el = ET.SubElement(root, "Row")
        for name, value in zip(names, row):
            ET.SubElement(row_el, name).text = value

    ET.indent(root, space="  ")
    return (XML_DECLARATION + ET.tostring(root, encoding="unicode")).encode("utf-8")


def render_excel_xml(table: Table) -> bytes:
    """SpreadsheetML workbook; the header row is the first <Row>."""
    _require_data(table)
    parts = [EXCEL_HEADER]
    for row in table.records():
        parts.append("   <Row>\n")
        for cell in row:
            parts.append('    <Cell><Data ss:Type="String">' + escape_xml(cell) + "</Data></Cell>\n")
        parts.append("   </Row>\n")
    parts.append(EXCEL_FOOTER)
    return "".join(parts).encode("utf-8")


RENDERERS: Dict[str, Renderer] = {
    "csv": render_csv,
    "json": render_json,
    "flatxml": render_flat_xml,
    "excel": render_excel_xml,
}

MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "flatxml": "application/xml",
    "excel": "application/vnd.ms-excel",
}


def writer_for_extension(ext: str) -> str:
    """Map an output extension (".csv", ".xls", ...) to a writer name."""
    ext = ext.strip().lower()
    if not ext:
        raise UnsupportedFormat("no file extension found in output filename")
    if not ext.startswith("."):
        ext = "." + ext
    try:
        return OUTPUT_EXTENSIONS[ext]
    except KeyError:
        raise UnsupportedFormat(f"unsupported output file extension: {ext}") from None


def render(table: Table, writer: str) -> bytes:
    return RENDERERS[writer](table)


def save(table: Table, path: str | Path) -> Path:
    """Write ``table`` to ``path`` in the format its extension selects."""
    path = Path(str(path).strip())
    writer = writer_for_extension(path.suffix)
    data = render(table, writer)
    path.write_bytes(data)
    log.info("Saved output to %s", path)
    return path
