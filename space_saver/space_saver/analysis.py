from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Optional

from . import loader, planner
from .bins import build_bins
from .models import (
    AnalysisResponse,
    CapacitySetting,
    ColumnMapping,
    DataAudit,
    PlanOptions,
    Table,
)
from .report import moves_to_csv


def _rows(table: Optional[Table]) -> Table:
    if table is None or table.headers is None or table.rows is None:
        return Table(headers=[], rows=[])
    return table


def analyze(
    locations: Optional[Table],
    assignments: Optional[Table],
    product_info: Optional[Table],
    mapping: ColumnMapping,
    capacity_by_type: Optional[Dict[str, CapacitySetting]],
    options: Optional[PlanOptions] = None,
) -> AnalysisResponse:
    """Build bins, plan moves and assemble the caller-facing response.

    Missing tables or capacity settings are treated as empty, which yields an
    empty but well-formed response.
    """
    opts = options or PlanOptions()
    locations = _rows(locations)
    assignments = _rows(assignments)
    product_info = _rows(product_info)

    skipped: Counter = Counter()
    bins = build_bins(
        locations,
        assignments,
        product_info,
        mapping,
        capacity_by_type or {},
        opts,
        skipped=skipped,
    )
    result = planner.plan(bins, opts)

    data_audit = DataAudit(
        file_counts={
            "locations": len(locations.rows),
            "product_locations": len(assignments.rows),
            "product_info": len(product_info.rows),
        },
        type_counts=dict(result.audit.capacity_mode_counts),
        unknown_capacity_bins=result.audit.unknown_capacity_bins,
        mixed_locations=len(result.mixed_locations),
        skipped_rows=dict(skipped),
    )
    return AnalysisResponse(result=result, csv_text=moves_to_csv(result.moves), data_audit=data_audit)


def analyze_request(payload: Any) -> AnalysisResponse:
    return analyze(**loader.load_request(payload))
