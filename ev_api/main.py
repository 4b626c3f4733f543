from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ev_api.schemas import CriteriaModel, OptionsResponse
from ev_core.data import load_dashboard_data
from ev_core.export import EmptyExportError, export_filename, project
from ev_core.filters import FilterCriteria, normalize_criteria
from ev_core.metrics_overview import compute_overview
from ev_core.metrics_table import compute_table
from ev_core.serializers import EXPORT_FORMATS, export_bytes
from ev_core.session import ViewState, prepare_context


app = FastAPI(title="EV Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _criteria_from_model(model: CriteriaModel) -> FilterCriteria:
    return normalize_criteria(model.model_dump())


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
            },
        )
    )


@app.get("/meta/options")
def meta_options():
    try:
        data_ctx = load_dashboard_data()
        ctx = prepare_context(ViewState(), data_ctx)
        options = ctx["options"]
        return _json(OptionsResponse(makes=options["makes"], types=options["types"], columns=ctx["columns"]))
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(500, exc)


@app.post("/overview")
def overview(criteria: CriteriaModel, dark: bool = Query(default=False)):
    try:
        data_ctx = load_dashboard_data()
        state = ViewState(dashboard=_criteria_from_model(criteria), dark=dark)
        ctx = prepare_context(state, data_ctx)
        return _json(compute_overview(state, ctx))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(500, exc)


@app.post("/table")
def table(criteria: CriteriaModel, page: int = Query(default=1)):
    try:
        data_ctx = load_dashboard_data()
        state = ViewState(table=_criteria_from_model(criteria), page=page)
        ctx = prepare_context(state, data_ctx)
        return _json(compute_table(state, ctx))
    except Exception as exc:
        logger.exception("table failed")
        return _error(500, exc)


@app.post("/export/{fmt}")
def export_table(fmt: str, criteria: CriteriaModel):
    if fmt not in EXPORT_FORMATS:
        return JSONResponse(status_code=404, content={"error": f"Unknown export format: {fmt}", "type": "NotFound"})
    media_type, basename = EXPORT_FORMATS[fmt]
    try:
        data_ctx = load_dashboard_data()
        state = ViewState(table=_criteria_from_model(criteria))
        ctx = prepare_context(state, data_ctx)
        grid = project(ctx["filtered_table"], ctx["columns"])
        content = export_bytes(fmt, grid, state.table)
    except EmptyExportError as exc:
        return _error(400, exc)
    except Exception as exc:
        logger.exception("export %s failed", fmt)
        return _error(500, exc)

    filename = export_filename(basename, fmt)
    logger.info("Exporting %d rows as %s", len(grid) - 1, filename)
    return Response(content=content, media_type=media_type, headers={"Content-Disposition": f"attachment; filename={filename}"})
