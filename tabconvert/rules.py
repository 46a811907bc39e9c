"""
Deterministic conversion rules.

This file exists to make the fixed choices explicit and enforceable.
"""

import re

TARGET_ENCODING = "utf-8-sig"  # UTF-8 with BOM, CSV output only
NORMALIZED_DELIMITER = ","

INPUT_FORMATS = ("csv", "json", "xml")

# output extension -> writer name
OUTPUT_EXTENSIONS = {
    ".csv": "csv",
    ".json": "json",
    ".flatxml": "flatxml",
    ".xls": "excel",
    ".xml": "excel",
}

# (name, exact shape, strptime format or None for RFC 3339); tried in order,
# first match wins
DATE_LAYOUTS = (
    (
        "rfc3339",
        re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})"),
        None,
    ),
    ("date", re.compile(r"\d{4}-\d{2}-\d{2}"), "%Y-%m-%d"),
    ("datetime", re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(\.\d+)?"), "%Y-%m-%d %H:%M:%S"),
    ("day-mon-year", re.compile(r"\d{2}-[A-Za-z]{3}-\d{4}"), "%d-%b-%Y"),
)
