import logging
import math

from fc_planner.core.constants import ACTION_SHIP, CENTRAL_ALLOCATION_CAP, CHANNELS
from fc_planner.core.errors import EmptyInputError
from fc_planner.services.channel_planning import generate_channel_plan
from fc_planner.services.direct_planning import generate_direct_plan

logger = logging.getLogger(__name__)


def available_central_stock(central_stock, cap=CENTRAL_ALLOCATION_CAP):
    """Units of each central SKU that one planning cycle may draw down."""
    available = {}
    for row in central_stock:
        available[row.central_sku] = math.floor(row.quantity * cap)
    return available


def central_demand(rows):
    demand = {}
    for row in rows:
        if row.action == ACTION_SHIP:
            demand[row.central_sku] = demand.get(row.central_sku, 0) + row.shipment_need
    return demand


def allocate(rows, central_stock):
    """Fill ``allocated_qty`` on every row against the capped central pool.

    When a central SKU is short, each SHIP row receives its demand-weighted
    share of the available units, floored, so the shares never add up to
    more than what is available.
    """
    available = available_central_stock(central_stock)
    demand = central_demand(rows)
    rationed = set()

    for row in rows:
        if row.action != ACTION_SHIP:
            row.allocated_qty = 0
            continue

        sku_available = available.get(row.central_sku, 0)
        total_demand = demand.get(row.central_sku, 0)
        if total_demand == 0:
            row.allocated_qty = 0
        elif sku_available >= total_demand:
            row.allocated_qty = row.shipment_need
        else:
            row.allocated_qty = row.shipment_need * sku_available // total_demand
            row.add_remark(f"Capped by Stock (Need: {row.shipment_need})")
            rationed.add(row.central_sku)

        if row.allocated_qty == 0 and row.shipment_need > 0:
            row.add_remark("Out of Stock")

    for central_sku in sorted(rationed):
        logger.info(
            "Rationed central SKU %s: demand %d, available %d",
            central_sku,
            demand[central_sku],
            available.get(central_sku, 0),
            extra={"central_sku": central_sku},
        )
    return rows


def build_allocated_plan(inputs, channels=CHANNELS):
    rows = []
    for channel in channels:
        rows.extend(generate_channel_plan(channel, inputs.sales, inputs.fc_stock, inputs.remarks))
    rows.extend(generate_direct_plan(inputs.sales, inputs.fc_stock, inputs.remarks))

    allocate(rows, inputs.central_stock)
    # Display order only; sort is stable for equal run rates.
    rows.sort(key=lambda row: row.run_rate, reverse=True)
    return rows


def run_planning(inputs):
    if not inputs.sales:
        raise EmptyInputError("sales")

    rows = build_allocated_plan(inputs)
    logger.info(
        "Planned %d rows from %d sales, %d FC stock, %d central stock, %d remark records",
        len(rows),
        len(inputs.sales),
        len(inputs.fc_stock),
        len(inputs.central_stock),
        len(inputs.remarks),
    )
    return rows
