from decimal import ROUND_HALF_UP, Decimal

from fc_planner.core.constants import INFINITE_COVER_DAYS, RUN_RATE_PERIOD_DAYS


def run_rate(total_qty, period_days=RUN_RATE_PERIOD_DAYS):
    return total_qty / period_days


def stock_cover_days(stock, rate):
    if rate == 0:
        return INFINITE_COVER_DAYS if stock > 0 else 0
    return stock / rate


def cover_quantity(total_qty, days, period_days=RUN_RATE_PERIOD_DAYS):
    """Units needed to cover ``days`` at the run rate of ``total_qty``.

    Multiplies before dividing so whole results stay exact ahead of any
    ceil/floor applied by the caller.
    """
    return days * total_qty / period_days


def round_half_up(value, decimals=2):
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
