import logging

from fc_planner.core.decision_rules import decide_action
from fc_planner.core.metrics import round_half_up, run_rate, stock_cover_days
from fc_planner.models.plan import Fulfillment, PlanRow
from fc_planner.services.catalog_service import (
    build_remark_index,
    index_first_sale_by_sku,
    resolve_catalog_identity,
)

logger = logging.getLogger(__name__)


def valid_channel_warehouses(channel, fc_stock):
    return {row.warehouse_id for row in fc_stock if row.channel == channel}


def _index_stock(channel, fc_stock):
    stock_index = {}
    for row in fc_stock:
        if row.channel != channel:
            continue
        key = (row.sku, row.warehouse_id)
        stock_index[key] = stock_index.get(key, 0) + row.quantity
    return stock_index


def _index_sales(channel, sales, valid_warehouses):
    sales_index = {}
    for sale in sales:
        if sale.channel != channel or sale.warehouse_id not in valid_warehouses:
            continue
        sales_index.setdefault((sale.sku, sale.warehouse_id), []).append(sale)
    return sales_index


def generate_channel_plan(channel, sales, fc_stock, remarks):
    """Build one PlanRow per SKU/FC pair that has stock or sales on ``channel``.

    Sales landing in an FC without stock records for the channel are left
    out. Those outside every tracked FC surface in the direct-fulfillment plan.
    """
    valid_warehouses = valid_channel_warehouses(channel, fc_stock)
    stock_index = _index_stock(channel, fc_stock)
    sales_index = _index_sales(channel, sales, valid_warehouses)
    remark_index = build_remark_index(remarks)
    first_sale_by_sku = index_first_sale_by_sku(sales)

    plans = []
    for key in dict.fromkeys([*stock_index, *sales_index]):
        sku, warehouse_id = key
        key_sales = sales_index.get(key, [])
        stock = stock_index.get(key, 0)
        style_id, central_sku = resolve_catalog_identity(sku, key_sales, first_sale_by_sku)

        total_qty = sum(sale.quantity for sale in key_sales)
        rate = run_rate(total_qty)
        cover = stock_cover_days(stock, rate)
        action, shipment_need, recall_qty, remark = decide_action(
            stock, total_qty, cover, remark_index.get(style_id)
        )

        row = PlanRow(
            channel=channel,
            fulfillment=Fulfillment.CHANNEL,
            style_id=style_id,
            sku=sku,
            central_sku=central_sku,
            warehouse_id=warehouse_id,
            sales_30d=total_qty,
            run_rate=round_half_up(rate),
            stock=stock,
            stock_cover=round_half_up(cover, 1),
            shipment_need=shipment_need,
            allocated_qty=0,
            recall_qty=recall_qty,
            action=action,
        )
        row.add_remark(remark)
        plans.append(row)

    logger.debug(
        "Channel %s: %d plan rows from %d FCs",
        channel,
        len(plans),
        len(valid_warehouses),
        extra={"channel": channel},
    )
    return plans
