TARGET_STOCK_COVER = 45
MAX_STOCK_COVER = 60
CENTRAL_ALLOCATION_CAP = 0.40
RUN_RATE_PERIOD_DAYS = 30
TOP_N = 10

# Returned by stock_cover_days when stock exists but nothing sells.
INFINITE_COVER_DAYS = 999

UNKNOWN = "UNKNOWN"
CLOSED_REMARK = "Closed"
GRAND_TOTAL_LABEL = "GRAND TOTAL"

ACTION_SHIP = "SHIP"
ACTION_RECALL = "RECALL"
ACTION_NONE = "NONE"

AMAZON = "Amazon IN"
FLIPKART = "Flipkart"
MYNTRA = "Myntra"
CHANNELS = (AMAZON, FLIPKART, MYNTRA)

# Display tag for direct-fulfillment rows; never present in raw data.
SELLER_TAG = "SELLER"

DEFAULT_FALLBACK_FC = "DEFAULT_FC"
FALLBACK_FCS = {
    AMAZON: ("BLR8", "HYD3", "BOM5", "CJB1", "DEL5"),
    FLIPKART: ("MALUR", "KOLKATA", "SANPKA", "HYDERABAD", "BHIWANDI"),
    MYNTRA: ("Bangalore", "Mumbai", "Bilaspur"),
}
