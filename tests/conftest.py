import pytest

from space_saver.models import CAP_COUNT, CAP_UNKNOWN, CAP_VOLUMETRIC, Bin


def bin_factory(
    sku,
    location,
    quantity,
    capacity=50,
    mode=CAP_COUNT,
    pickable=False,
    sellable=True,
    unit_volume=None,
    aisle=None,
    shelf=None,
    location_type="Bin",
    transferable=None,
):
    if mode == CAP_UNKNOWN:
        capacity, used = 0.0, 0.0
    elif mode == CAP_VOLUMETRIC:
        used = quantity * unit_volume
    else:
        used = float(quantity)
    return Bin(
        sku=sku,
        location=location,
        quantity=quantity,
        location_type=location_type,
        pickable=pickable,
        sellable=sellable,
        capacity_mode=mode,
        capacity=float(capacity),
        used=used,
        free=max(capacity - used, 0.0),
        transferable=transferable,
        aisle=aisle,
        shelf=shelf,
        unit_volume=unit_volume,
    )


@pytest.fixture
def make_bin():
    return bin_factory
