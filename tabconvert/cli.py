"""Command-line interface for tabconvert.

    tabconvert -url https://example.com/data.json -format json -out data.xls

Fetch -> parse/normalize -> write, once. The output extension picks the
writer and is checked before anything is downloaded.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .errors import TabconvertError
from .fetch import fetch
from .normalize import convert_bytes
from .rules import INPUT_FORMATS
from .settings import Settings
from .writers import save, writer_for_extension

log = logging.getLogger("tabconvert.cli")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tabconvert",
        description="Fetch a CSV/JSON/XML dataset and re-emit it as CSV, JSON, flat XML or Excel XML.",
    )
    p.add_argument("-url", "--url", required=True, help="File URL to fetch (HTTP/HTTPS)")
    p.add_argument(
        "-format", "--format",
        default="csv",
        type=str.lower,
        choices=INPUT_FORMATS,
        help="Input format: csv, json, xml",
    )
    p.add_argument(
        "-out", "--out",
        default="output.csv",
        help="Output file path with extension (csv, json, flatxml, xls, xml)",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    out_path = args.out.strip()
    url = args.url.strip()
    if not url:
        log.error("Please provide -url argument")
        return 2

    try:
        writer_for_extension(Path(out_path).suffix)
        data = fetch(url, settings)
        table = convert_bytes(data, args.format)
        save(table, out_path)
    except TabconvertError as ex:
        log.error("%s: %s", type(ex).__name__, ex)
        return 1
    except OSError as ex:
        log.error("Failed to save output: %s", ex)
        return 1

    log.info("Converted %d rows x %d columns", len(table.rows), table.columns)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
