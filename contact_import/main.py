import logging

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import PlainTextResponse
from .models import ParseResult, HealthResponse
from .parser import parse_import_file, preview_import_file
from .rules import (
    ACCEPTED_CONTENT_TYPES,
    ACCEPTED_SUFFIXES,
    API_PREVIEW_ROWS,
    DEFAULT_TEMPLATE_FORMAT,
    IMPORT_TEMPLATES,
    UPLOAD_ENCODING,
)

LOGGER = logging.getLogger(__name__)

app = FastAPI(
    title="contact-import",
    description="Locale-aware normalization of delimited contact files",
    version="0.1.0",
)


async def _read_upload(file: UploadFile) -> str:
    suffix_ok = (file.filename or "").lower().endswith(ACCEPTED_SUFFIXES)
    if not suffix_ok and file.content_type not in ACCEPTED_CONTENT_TYPES:
        raise HTTPException(status_code=422, detail="Only CSV/TSV/TXT files are supported")

    raw = await file.read()
    try:
        return raw.decode(UPLOAD_ENCODING)
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="File must be UTF-8 encoded text")


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/import/preview", response_model=ParseResult)
async def preview_import(
    file: UploadFile = File(...),
    max_rows: int = Form(API_PREVIEW_ROWS, ge=1),
):
    content = await _read_upload(file)
    result = preview_import_file(content, max_rows)
    LOGGER.info(
        "Preview parsed: %s records, %s errors",
        result.stats.parsed_successfully,
        result.stats.parse_errors,
    )
    return result

@app.post("/import/parse", response_model=ParseResult)
async def parse_import(file: UploadFile = File(...)):
    content = await _read_upload(file)
    result = parse_import_file(content)
    LOGGER.info(
        "Parsed %s records, %s errors from %s",
        result.stats.parsed_successfully,
        result.stats.parse_errors,
        file.filename,
    )
    return result

@app.get("/import/template", response_class=PlainTextResponse)
def import_template(format: str = DEFAULT_TEMPLATE_FORMAT):
    filename, content = IMPORT_TEMPLATES.get(format, IMPORT_TEMPLATES[DEFAULT_TEMPLATE_FORMAT])
    return PlainTextResponse(
        content,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
