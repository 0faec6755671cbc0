from __future__ import annotations

from .models import (
    AssignmentColumns,
    CapacitySetting,
    ColumnMapping,
    ColumnRef,
    LocationColumns,
    ProductInfoColumns,
    Table,
)


def sample_locations() -> Table:
    return Table(
        headers=["location_name", "type", "pickable", "sellable", "aisle", "shelf"],
        rows=[
            ["A01-B-01", "Shelf", "true", "true", "A01", "B"],
            ["A01-B-02", "Shelf", "true", "true", "A01", "B"],
            ["A02-C-01", "Shelf", "true", "true", "A02", "C"],
            ["A05-E-01", "Shelf", "true", "true", "A05", "E"],
            ["OVERSTOCK-1", "Bin", "false", "true", "A04", "E"],
            ["OVERSTOCK-2", "Bin", "false", "true", "A04", "F"],
            ["OVERSTOCK-3", "Bin", "false", "true", "A04", "G"],
            ["DOCK-1", "Staging", "false", "true", "D01", ""],
            ["QC-HOLD", "Bin", "false", "false", "Q01", "A"],
        ],
    )


def sample_assignments() -> Table:
    return Table(
        headers=["sku", "location", "qty"],
        rows=[
            ["SKU001", "OVERSTOCK-1", "10"],
            ["SKU001", "OVERSTOCK-2", "15"],
            ["SKU001", "OVERSTOCK-3", "20"],
            ["SKU002", "A01-B-01", "5"],
            ["SKU002", "A02-C-01", "8"],
            ["SKU003", "A05-E-01", "12"],
            ["SKU004", "A05-E-01", "3"],
            ["SKU003", "DOCK-1", "40"],
            ["SKU003", "QC-HOLD", "6"],
        ],
    )


def sample_product_info() -> Table:
    # keyed rows
    return Table(
        headers=["sku", "length", "width", "height"],
        rows=[
            {"sku": "SKU001", "length": "12", "width": "8", "height": "6"},
            {"sku": "SKU002", "length": "10", "width": "10", "height": "2"},
            {"sku": "SKU003", "length": "4", "width": "4", "height": "4"},
            {"sku": "SKU004", "length": "", "width": "3", "height": "3"},
        ],
    )


def sample_mapping() -> ColumnMapping:
    return ColumnMapping(
        locations=LocationColumns(
            name=ColumnRef(0, "location_name"),
            type=ColumnRef(1, "type"),
            pickable=ColumnRef(2, "pickable"),
            sellable=ColumnRef(3, "sellable"),
            aisle=ColumnRef(4, "aisle"),
            shelf=ColumnRef(5, "shelf"),
        ),
        assignments=AssignmentColumns(
            sku=ColumnRef(0, "sku"),
            location=ColumnRef(1, "location"),
            quantity=ColumnRef(2, "qty"),
        ),
        product_info=ProductInfoColumns(
            sku=ColumnRef(key="sku"),
            length=ColumnRef(key="length"),
            width=ColumnRef(key="width"),
            height=ColumnRef(key="height"),
        ),
    )


def sample_capacity() -> dict[str, CapacitySetting]:
    return {
        "Shelf": CapacitySetting(cu_in=5000, units=40),
        "Bin": CapacitySetting(units=50),
    }


def sample_request() -> dict:
    """The bundled sample as a JSON request body for ``POST /api/plan``."""
    return {
        "locations_table": {"headers": sample_locations().headers, "rows": sample_locations().rows},
        "assignments_table": {"headers": sample_assignments().headers, "rows": sample_assignments().rows},
        "product_info_table": {"headers": sample_product_info().headers, "rows": sample_product_info().rows},
        "mapping": {
            "locations": {
                "name_col": 0,
                "type_col": 1,
                "pickable_col": 2,
                "sellable_col": 3,
                "aisle_col": 4,
                "shelf_col": 5,
            },
            "assignments": {"sku_col": 0, "location_col": 1, "qty_col": 2},
            "product_info": {
                "sku_key": "sku",
                "length_key": "length",
                "width_key": "width",
                "height_key": "height",
            },
        },
        "capacity_by_type": {
            "Shelf": {"cu_in": 5000, "units": 40},
            "Bin": {"units": 50},
        },
        "options": {
            "headroom_fraction": 0.9,
            "preferred_pick_aisles": ["A01", "A02", "A03"],
            "preferred_pick_shelves": ["B", "C", "D"],
        },
    }
