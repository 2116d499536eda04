import logging
import math

from fc_planner.core.constants import (
    ACTION_SHIP,
    DEFAULT_FALLBACK_FC,
    FALLBACK_FCS,
    TARGET_STOCK_COVER,
    UNKNOWN,
)
from fc_planner.core.decision_rules import is_closed
from fc_planner.core.metrics import cover_quantity, round_half_up, run_rate
from fc_planner.models.plan import Fulfillment, PlanRow
from fc_planner.services.catalog_service import build_remark_index

logger = logging.getLogger(__name__)


def tracked_warehouses(fc_stock):
    # FCs stocked by any channel count, unlike valid_channel_warehouses.
    return {row.warehouse_id for row in fc_stock}


def fallback_warehouse(channel):
    return (FALLBACK_FCS.get(channel) or (DEFAULT_FALLBACK_FC,))[0]


def generate_direct_plan(sales, fc_stock, remarks):
    """Plan ship-only replenishment for sales fulfilled outside every tracked FC."""
    warehouses = tracked_warehouses(fc_stock)
    remark_index = build_remark_index(remarks)

    grouped = {}
    for sale in sales:
        if sale.warehouse_id in warehouses:
            continue
        grouped.setdefault((sale.channel, sale.sku), []).append(sale)

    plans = []
    skipped_closed = 0
    for (channel, sku), group in grouped.items():
        representative = group[0]
        style_id = representative.style_id or UNKNOWN
        if is_closed(remark_index.get(style_id)):
            skipped_closed += 1
            continue

        total_qty = sum(sale.quantity for sale in group)
        shipment_need = math.ceil(cover_quantity(total_qty, TARGET_STOCK_COVER))
        if shipment_need <= 0:
            continue

        row = PlanRow(
            channel=channel,
            fulfillment=Fulfillment.DIRECT,
            style_id=style_id,
            sku=sku,
            central_sku=representative.central_sku or UNKNOWN,
            warehouse_id=fallback_warehouse(channel),
            sales_30d=total_qty,
            run_rate=round_half_up(run_rate(total_qty)),
            stock=0,
            stock_cover=0.0,
            shipment_need=shipment_need,
            allocated_qty=0,
            recall_qty=0,
            action=ACTION_SHIP,
        )
        row.add_remark(f"Seller Replenishment to {channel}")
        plans.append(row)

    logger.debug(
        "Direct fulfillment: %d plan rows, %d closed-style groups skipped",
        len(plans),
        skipped_closed,
    )
    return plans
