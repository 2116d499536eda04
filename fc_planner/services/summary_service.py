from fc_planner.core.constants import GRAND_TOTAL_LABEL, SELLER_TAG, TOP_N
from fc_planner.core.metrics import round_half_up

_TOTAL_FIELDS = ("total_stock", "total_sale", "run_rate", "shipment_need", "allocated_qty", "recall_qty")


def filter_plan_rows(rows, channel=None, direct=False):
    # Direct rows display the seller tag as their channel.
    if direct or channel == SELLER_TAG:
        return [row for row in rows if row.is_direct]
    return [
        row
        for row in rows
        if not row.is_direct and (channel is None or row.channel == channel)
    ]


def _empty_totals(warehouse_id):
    totals = {"warehouse_id": warehouse_id}
    for field_name in _TOTAL_FIELDS:
        totals[field_name] = 0
    return totals


def _with_cover(totals):
    rate = totals["run_rate"] = round_half_up(totals["run_rate"])
    totals["stock_cover"] = int(round_half_up(totals["total_stock"] / rate, 0)) if rate > 0 else 0
    return totals


def warehouse_summary(rows):
    by_warehouse = {}
    for row in rows:
        totals = by_warehouse.get(row.warehouse_id)
        if totals is None:
            totals = by_warehouse[row.warehouse_id] = _empty_totals(row.warehouse_id)
        totals["total_stock"] += row.stock
        totals["total_sale"] += row.sales_30d
        totals["run_rate"] += row.run_rate
        totals["shipment_need"] += row.shipment_need
        totals["allocated_qty"] += row.allocated_qty
        totals["recall_qty"] += row.recall_qty

    results = [_with_cover(by_warehouse[key]) for key in sorted(by_warehouse)]
    grand_total = _empty_totals(GRAND_TOTAL_LABEL)
    for totals in results:
        for field_name in _TOTAL_FIELDS:
            grand_total[field_name] += totals[field_name]
    return {"results": results, "grand_total": _with_cover(grand_total)}


def _top_by_sales(rows, key_name, attribute, limit):
    grouped = {}
    for row in rows:
        key = getattr(row, attribute)
        entry = grouped.get(key)
        if entry is None:
            entry = grouped[key] = {key_name: key, "total_sale": 0, "run_rate": 0.0}
        entry["total_sale"] += row.sales_30d
        entry["run_rate"] += row.run_rate
    ranked = sorted(grouped.values(), key=lambda item: item["total_sale"], reverse=True)[:limit]
    for entry in ranked:
        entry["run_rate"] = round_half_up(entry["run_rate"])
    return ranked


def top_skus(rows, limit=TOP_N):
    return _top_by_sales(rows, "sku", "sku", limit)


def top_styles(rows, limit=TOP_N):
    return _top_by_sales(rows, "style_id", "style_id", limit)


def plan_summary(rows, limit=TOP_N):
    return {
        "warehouses": warehouse_summary(rows),
        "top_skus": top_skus(rows, limit),
        "top_styles": top_styles(rows, limit),
    }
