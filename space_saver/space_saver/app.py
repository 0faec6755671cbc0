from __future__ import annotations

import logging
import os
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from . import analysis, data, loader
from .bins import location_type_counts
from .report import move_sheet_pdf, response_to_dict

load_dotenv()
logging.basicConfig(level=os.environ.get("SPACE_SAVER_LOG_LEVEL", "INFO"))
logger = logging.getLogger("SpaceSaver-API")

app = FastAPI(title="Space Saver", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise loader.InputError(f"Request body is not valid JSON: {e}") from e


async def _analyze(request: Request):
    payload = await _read_json(request)
    return analysis.analyze_request(payload)


def _failure(e: Exception) -> JSONResponse:
    if isinstance(e, loader.InputError):
        return JSONResponse({"error": str(e)}, status_code=400)
    logger.error(f"Analysis error: {e}")
    return JSONResponse({"error": "Analysis failed", "details": str(e)}, status_code=500)


HTML_PAGE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Space Saver</title>
  <style>
    body { font-family: 'Segoe UI', sans-serif; background: #0f172a; color: #e5e7eb; margin: 0; }
    .container { max-width: 900px; margin: 40px auto; padding: 0 24px; }
    code { background: #0a0f1e; padding: 2px 6px; border-radius: 6px; }
    li { margin: 8px 0; }
    .hint { color: #94a3b8; font-size: 13px; }
  </style>
</head>
<body>
  <div class="container">
    <h1>Space Saver</h1>
    <p>Consolidate partially used bins into fewer locations without overfilling destinations.</p>
    <ul>
      <li><code>POST /api/plan</code> tables, column mapping, capacity by type and options; returns moves, KPIs and audit.</li>
      <li><code>POST /api/plan/moves.csv</code> same body; the move list as CSV.</li>
      <li><code>POST /api/plan/moves.pdf</code> same body; a printable move sheet.</li>
      <li><code>POST /api/location-types</code> distinct location types in a locations table.</li>
      <li><code>GET /api/sample</code> a sample request body.</li>
    </ul>
    <p class="hint">Nothing is stored between requests.</p>
  </div>
</body>
</html>
"""


@app.get("/", response_class=HTMLResponse)
async def index():
    return HTML_PAGE


@app.get("/api/sample")
async def sample_request():
    return JSONResponse(data.sample_request())


@app.post("/api/plan")
async def run_plan(request: Request):
    try:
        response = await _analyze(request)
    except Exception as e:
        return _failure(e)
    return JSONResponse({"success": True, "data": response_to_dict(response)})


@app.post("/api/plan/moves.csv")
async def plan_csv(request: Request):
    try:
        response = await _analyze(request)
    except Exception as e:
        return _failure(e)
    return Response(
        content=response.csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="space_saver_moves.csv"'},
    )


@app.post("/api/plan/moves.pdf")
async def plan_pdf(request: Request):
    try:
        response = await _analyze(request)
    except Exception as e:
        return _failure(e)
    pdf_bytes = move_sheet_pdf(response.result.moves, response.result.kpis)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="space_saver_moves.pdf"'},
    )


@app.post("/api/location-types")
async def location_types(request: Request):
    try:
        body = await _read_json(request)
        if not isinstance(body, dict):
            raise loader.InputError("Missing or invalid request body")
        table = loader.load_table(body.get("table"), "locations")
        ref = loader.column_ref(body, "type", required=True)
    except Exception as e:
        return _failure(e)
    if ref.index is not None and not 0 <= ref.index < len(table.headers):
        return JSONResponse({"error": f"Invalid column index: {ref.index}"}, status_code=400)
    counts = location_type_counts(table, ref)
    return JSONResponse({"types": list(counts), "counts": counts})
