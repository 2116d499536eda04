import math

from fc_planner.core.constants import (
    ACTION_NONE,
    ACTION_RECALL,
    ACTION_SHIP,
    CLOSED_REMARK,
    MAX_STOCK_COVER,
    TARGET_STOCK_COVER,
)
from fc_planner.core.metrics import cover_quantity


def is_closed(company_remark):
    return company_remark == CLOSED_REMARK


def decide_action(stock, total_qty, cover_days, company_remark=None):
    """Return ``(action, shipment_need, recall_qty, remark)`` for one FC row.

    A closed style exits completely regardless of cover. Otherwise stock is
    topped up below the target cover and trimmed above the max cover.
    """
    if is_closed(company_remark):
        action = ACTION_RECALL if stock > 0 else ACTION_NONE
        return action, 0, stock, "Style Closed"

    shipment_need = 0
    recall_qty = 0
    action = ACTION_NONE
    if cover_days < TARGET_STOCK_COVER:
        shipment_need = max(0, math.ceil(cover_quantity(total_qty, TARGET_STOCK_COVER) - stock))
        action = ACTION_SHIP if shipment_need else ACTION_NONE
    elif cover_days > MAX_STOCK_COVER:
        recall_qty = max(0, math.floor(stock - cover_quantity(total_qty, MAX_STOCK_COVER)))
        action = ACTION_RECALL if recall_qty else ACTION_NONE
    return action, shipment_need, recall_qty, ""
