from __future__ import annotations

import csv
import io
from collections import Counter
from dataclasses import asdict
from typing import Dict, List, Tuple

from fpdf import FPDF

from .models import (
    CAP_COUNT,
    CAP_UNKNOWN,
    CAP_VOLUMETRIC,
    AnalysisResponse,
    Audit,
    Bin,
    Kpis,
    MixedLocation,
    Move,
    PlanOptions,
    PlanResult,
    TypeUtilization,
)

CSV_HEADER = ["sku", "from_location", "to_location", "qty_to_move", "reason", "est_fill_after"]


def _audit_note(opts: PlanOptions) -> str:
    aisles = ", ".join(opts.preferred_pick_aisles) or "none"
    shelves = ", ".join(opts.preferred_pick_shelves) or "none"
    return (
        "Empty-only moves: a source bin is moved in full or not at all. "
        f"Pick consolidation prefers aisles {aisles} and shelves {shelves}."
    )


def _wasted(bins: List[Bin], mode: str) -> float | None:
    total = sum(max(b.capacity - b.used, 0.0) for b in bins if b.capacity_mode == mode)
    return total or None


def mixed_locations(bins: List[Bin]) -> List[MixedLocation]:
    by_loc: Dict[str, Dict[str, float]] = {}
    for b in bins:
        skus = by_loc.setdefault(b.location, {})
        skus[b.sku] = skus.get(b.sku, 0) + b.quantity
    return [
        MixedLocation(location=loc, skus=list(skus), total_quantity=sum(skus.values()))
        for loc, skus in by_loc.items()
        if len(skus) > 1
    ]


def utilization_by_type(bins: List[Bin]) -> List[TypeUtilization]:
    totals: Dict[Tuple[str, str], List[float]] = {}
    for b in bins:
        if b.capacity_mode == CAP_UNKNOWN:
            continue
        entry = totals.setdefault((b.location_type, b.capacity_mode), [0, 0.0, 0.0])
        entry[0] += 1
        entry[1] += b.capacity
        entry[2] += b.used
    out = []
    for (loc_type, mode), (count, capacity, used) in totals.items():
        out.append(
            TypeUtilization(
                location_type=loc_type,
                capacity_mode=mode,
                bins=int(count),
                total_capacity=capacity,
                total_used=used,
                wasted=max(capacity - used, 0.0),
                average_utilization=round(used / capacity * 100, 2) if capacity > 0 else 0.0,
            )
        )
    return out


def assemble(
    all_bins: List[Bin],
    before: List[Bin],
    after: List[Bin],
    snapshot: List[Bin],
    moves: List[Move],
    options: PlanOptions,
) -> PlanResult:
    """Summarise a planning run.

    ``before``/``after`` are the plannable bins either side of the
    simulation, ``all_bins`` is the caller's input and ``snapshot`` the full
    post-plan copy handed back to the caller.
    """
    mode_counts = Counter(b.capacity_mode for b in all_bins)
    occupied_before = sum(1 for b in before if b.quantity > 0)
    occupied_after = sum(1 for b in after if b.quantity > 0)

    kpis = Kpis(
        bins_freed=occupied_before - occupied_after,
        opportunities=len({m.sku for m in moves}),
        total_sellable=len(before),
        wasted_volumetric=_wasted(after, CAP_VOLUMETRIC),
        wasted_count_based=_wasted(after, CAP_COUNT),
    )
    audit = Audit(
        unknown_capacity_bins=mode_counts.get(CAP_UNKNOWN, 0),
        capacity_mode_counts=dict(mode_counts),
        reason_counts=dict(Counter(m.reason for m in moves)),
        note=_audit_note(options),
    )
    return PlanResult(
        moves=moves,
        bins_after=snapshot,
        kpis=kpis,
        mixed_locations=mixed_locations(before),
        audit=audit,
        utilization_by_type=utilization_by_type(after),
    )


def moves_to_csv(moves: List[Move]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for m in moves:
        writer.writerow(
            [
                m.sku,
                m.from_location,
                m.to_location,
                m.quantity,
                m.reason,
                f"{m.estimated_fill_after * 100:.1f}%",
            ]
        )
    body = buf.getvalue().rstrip("\n")
    header = ",".join(CSV_HEADER)
    return f"{header}\n{body}" if body else header


def result_to_dict(result: PlanResult) -> dict:
    return asdict(result)


def response_to_dict(response: AnalysisResponse) -> dict:
    return {
        "result": result_to_dict(response.result),
        "csv_text": response.csv_text,
        "data_audit": asdict(response.data_audit),
    }


def _latin1(text) -> str:
    return str(text).encode("latin-1", "replace").decode("latin-1")


def move_sheet_pdf(moves: List[Move], kpis: Kpis) -> bytes:
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Consolidation Move Sheet", ln=1)
    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 8, f"Moves: {len(moves)}", ln=1)
    pdf.cell(0, 8, f"Bins freed: {kpis.bins_freed}", ln=1)
    pdf.cell(0, 8, f"SKUs affected: {kpis.opportunities}", ln=1)
    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(35, 8, "SKU", border=1)
    pdf.cell(35, 8, "From", border=1)
    pdf.cell(35, 8, "To", border=1)
    pdf.cell(20, 8, "Qty", border=1)
    pdf.cell(40, 8, "Reason", border=1)
    pdf.cell(25, 8, "Fill after", border=1, ln=1)
    pdf.set_font("Helvetica", "", 10)
    for m in moves:
        pdf.cell(35, 8, _latin1(m.sku), border=1)
        pdf.cell(35, 8, _latin1(m.from_location), border=1)
        pdf.cell(35, 8, _latin1(m.to_location), border=1)
        pdf.cell(20, 8, str(m.quantity), border=1)
        pdf.cell(40, 8, m.reason, border=1)
        pdf.cell(25, 8, f"{m.estimated_fill_after * 100:.1f}%", border=1, ln=1)
    if not moves:
        pdf.ln(2)
        pdf.multi_cell(0, 6, "No consolidation moves found.")
    out = pdf.output(dest="S")
    if isinstance(out, (bytes, bytearray)):
        return bytes(out)
    return str(out).encode("latin1")
