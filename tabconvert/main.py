import base64
import hashlib
from pathlib import Path

from fastapi import FastAPI, UploadFile, File, Form, HTTPException

from . import __version__
from .errors import TabconvertError
from .models import ConvertResponse, HealthResponse
from .normalize import Table, convert_bytes
from .rules import INPUT_FORMATS
from .writers import MEDIA_TYPES, render, writer_for_extension

app = FastAPI(
    title="tabconvert",
    description="Convert CSV, JSON and XML datasets into CSV, JSON, flat XML or Excel XML",
    version=__version__,
)


def _build_response(table: Table, output_format: str, input_format: str) -> dict:
    writer = writer_for_extension(output_format)
    data = render(table, writer)
    return {
        "output": {
            "sha256": hashlib.sha256(data).hexdigest(),
            "format": writer,
            "media_type": MEDIA_TYPES[writer],
            "content_b64": base64.b64encode(data).decode("ascii"),
        },
        "summary": {
            "rows": len(table.rows),
            "columns": table.columns,
            "input_format": input_format,
        },
    }


def _convert(raw: bytes, input_format: str, output_format: str) -> dict:
    try:
        writer_for_extension(output_format)
        table = convert_bytes(raw, input_format)
        return _build_response(table, output_format, input_format)
    except TabconvertError as ex:
        raise HTTPException(status_code=422, detail=str(ex))


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/convert", response_model=ConvertResponse)
async def convert_upload(file: UploadFile = File(...), output_format: str = Form("json")):
    input_format = Path(file.filename or "").suffix.lower().lstrip(".")
    if input_format not in INPUT_FORMATS:
        raise HTTPException(status_code=422, detail="Only CSV, JSON and XML files are supported")

    raw = await file.read()
    return _convert(raw, input_format, output_format)

