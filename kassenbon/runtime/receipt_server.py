"""FastAPI server for parsing and storing posted receipt email bodies."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kassenbon.receipt.html_parser import MalformedDocument
from kassenbon.receipt.html_result_parser import extract_receipt_data, extraction_to_dict
from kassenbon.runtime import get_logger, get_paths, load_mail_sources
from kassenbon.runtime.receipt_storage import ReceiptTables

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the table directory on startup."""
    get_paths().ensure_data_directory()
    yield


app = FastAPI(title="Kassenbon Receipt Parser", lifespan=lifespan)


async def _read_email_body(request: Request) -> str:
    body = await request.body()
    return body.decode("utf-8", errors="replace")


@app.post("/parse")
async def parse_receipt_email(request: Request) -> JSONResponse:
    """Parse a raw HTML email body and return the extracted data."""
    email_body = await _read_email_body(request)
    if not email_body.strip():
        return JSONResponse({"status": "error", "message": "Empty request body"}, status_code=400)

    try:
        extraction = extract_receipt_data(email_body)
    except MalformedDocument as e:
        logger.warning("Rejected malformed receipt: %s", e)
        return JSONResponse({"status": "error", "message": str(e)}, status_code=422)

    return JSONResponse({"status": "success", **extraction_to_dict(extraction)})


@app.post("/ingest")
async def ingest_receipt_email(
    request: Request,
    store_name: str | None = None,
    date: str | None = None,
) -> JSONResponse:
    """Parse a raw HTML email body and load it into the tables."""
    email_body = await _read_email_body(request)
    if not email_body.strip():
        return JSONResponse({"status": "error", "message": "Empty request body"}, status_code=400)

    try:
        purchase_date = datetime.fromisoformat(date) if date else datetime.now().replace(microsecond=0)
    except ValueError:
        return JSONResponse({"status": "error", "message": f"Invalid date: {date}"}, status_code=400)

    try:
        extraction = extract_receipt_data(email_body)
    except MalformedDocument as e:
        logger.warning("Rejected malformed receipt: %s", e)
        return JSONResponse({"status": "error", "message": str(e)}, status_code=422)

    tables = ReceiptTables(get_paths().data)
    result = tables.load_receipt(
        extraction,
        store_name=store_name or load_mail_sources().store_name,
        purchase_date=purchase_date,
    )
    logger.info("Ingested receipt with %d items as purchase %s", len(extraction.line_items), result.purchase_id)

    return JSONResponse(
        {
            "status": "success",
            "action": "duplicate" if result.duplicate else "stored",
            "store_id": result.store_id,
            "purchase_id": result.purchase_id,
            "items_written": result.items_written,
        }
    )


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
