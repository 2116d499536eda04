from fc_planner.core.constants import UNKNOWN


def build_remark_index(remarks):
    """Map style id to its company remark; a later duplicate replaces an earlier one."""
    index = {}
    for remark in remarks:
        index[remark.style_id] = remark.company_remark
    return index


def index_first_sale_by_sku(sales):
    first_sale = {}
    for sale in sales:
        first_sale.setdefault(sale.sku, sale)
    return first_sale


def resolve_catalog_identity(sku, key_sales, first_sale_by_sku):
    """Return ``(style_id, central_sku)`` for a SKU/FC key.

    Tiers, in order: a sale recorded for the key itself, any sale of the SKU
    anywhere, then the UNKNOWN sentinel.
    """
    representative = key_sales[0] if key_sales else first_sale_by_sku.get(sku)
    if representative is None:
        return UNKNOWN, UNKNOWN
    return representative.style_id or UNKNOWN, representative.central_sku or UNKNOWN
