import csv
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from pathlib import Path
from urllib import error, request
from urllib.parse import urlparse

from openpyxl import load_workbook

from fc_planner.config import get_settings
from fc_planner.core.errors import SchemaViolationError, SourceFetchError, SourceFormatError
from fc_planner.models.records import (
    CatalogRemark,
    CentralStockRecord,
    PlanningInputs,
    SaleRecord,
    WarehouseStockRecord,
)

logger = logging.getLogger(__name__)

SALES = "sales"
FC_STOCK = "fc_stock"
CENTRAL_STOCK = "central_stock"
REMARKS = "remarks"
SOURCE_NAMES = (SALES, FC_STOCK, CENTRAL_STOCK, REMARKS)

_ALIAS_SPECS = (
    (("mp",), "channel"),
    (("marketplace",), "channel"),
    (("channel",), "channel"),
    (("channel", "name"), "channel"),
    (("order", "date"), "date"),
    (("sale", "date"), "date"),
    (("date",), "date"),
    (("sku",), "sku"),
    (("seller", "sku"), "sku"),
    (("channel", "sku"), "sku"),
    (("sku", "code"), "sku"),
    (("channel", "id"), "channel_id"),
    (("channel", "product", "id"), "channel_id"),
    (("listing", "id"), "channel_id"),
    (("asin",), "channel_id"),
    (("fsn",), "channel_id"),
    (("qty",), "quantity"),
    (("quantity",), "quantity"),
    (("units",), "quantity"),
    (("stock",), "quantity"),
    (("inventory",), "quantity"),
    (("on", "hand"), "quantity"),
    (("available", "qty"), "quantity"),
    (("warehouse",), "warehouse_id"),
    (("warehouse", "id"), "warehouse_id"),
    (("fc",), "warehouse_id"),
    (("fc", "id"), "warehouse_id"),
    (("fulfillment", "center"), "warehouse_id"),
    (("fulfillment", "type"), "fulfillment_type"),
    (("fulfilment", "type"), "fulfillment_type"),
    (("uniware", "sku"), "central_sku"),
    (("central", "sku"), "central_sku"),
    (("master", "sku"), "central_sku"),
    (("style",), "style_id"),
    (("style", "id"), "style_id"),
    (("style", "code"), "style_id"),
    (("size",), "size"),
    (("category",), "category"),
    (("category", "name"), "category"),
    (("company", "remark"), "company_remark"),
    (("remark",), "company_remark"),
    (("remarks",), "company_remark"),
    (("status",), "company_remark"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}

REQUIRED_COLUMNS = {
    SALES: {"channel", "sku", "quantity", "warehouse_id", "central_sku", "style_id"},
    FC_STOCK: {"channel", "warehouse_id", "sku", "quantity"},
    CENTRAL_STOCK: {"central_sku", "quantity"},
    REMARKS: {"style_id", "company_remark"},
}

SHEET_ALIASES = {
    SALES: (SALES, "sale_30d", "sales_30d", "sale"),
    FC_STOCK: (FC_STOCK, "fc_wise_stock", "warehouse_stock"),
    CENTRAL_STOCK: (CENTRAL_STOCK, "uniware_stock", "central"),
    REMARKS: (REMARKS, "company_remarks", "remark", "catalog"),
}

SOURCE_SETTING_NAMES = {
    SALES: "SALES_SOURCE",
    FC_STOCK: "FC_STOCK_SOURCE",
    CENTRAL_STOCK: "CENTRAL_STOCK_SOURCE",
    REMARKS: "REMARKS_SOURCE",
}

_PLACEHOLDER_VALUES = {"none", "[none]", "null", "[null]", "na", "n/a", "nan", "-", "--"}
_HTML_MARKERS = ("<!doctype html", "<html", "<head", "<body")
_ALLOWED_HTTP_SCHEMES = {"http", "https"}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_text(value):
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    if not text:
        return None
    if text.lower() in _PLACEHOLDER_VALUES:
        return None
    return text


def _clean_date(value):
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return _clean_text(value)


def to_quantity(value):
    """Lenient integer parse: thousands separators stripped, garbage and negatives become 0."""
    if _is_blank(value) or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value))
    value_text = str(value).strip().replace(",", "").replace(" ", "")
    try:
        number = int(value_text)
    except ValueError:
        try:
            number = int(float(value_text))
        except (ValueError, OverflowError):
            return 0
    return max(0, number)


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def normalize_sheet_name(name):
    value_text = str(name).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    return "_".join(part for part in value_text.split("_") if part)


def looks_like_html(text):
    head = text.lstrip()[:512].lower()
    return any(marker in head for marker in _HTML_MARKERS)


def _looks_like_header_row(row, header_set):
    matches = 0
    non_blank = 0
    for value in row:
        if _is_blank(value):
            continue
        non_blank += 1
        if normalize_header(value) in header_set:
            matches += 1
    return 0 < non_blank == matches


def _rows_to_records(rows_iter):
    headers = None
    for row in rows_iter:
        if row and not all(_is_blank(value) for value in row):
            headers = list(row)
            break
    if headers is None:
        return [], set(), []

    indices = []
    seen = {}
    for idx, header in enumerate(headers):
        key = normalize_header(header)
        if not key:
            continue
        if key in seen:
            logger.warning(
                "Headers %r and %r both map to %s; keeping %r",
                seen[key],
                header,
                key,
                seen[key],
            )
            continue
        seen[key] = header
        indices.append((idx, key))
    columns = set(seen)

    records = []
    for row in rows_iter:
        if row is None or all(_is_blank(value) for value in row):
            continue
        if _looks_like_header_row(row, columns):
            continue
        records.append({key: row[idx] if idx < len(row) else None for idx, key in indices})
    return records, columns, [header for header in headers if not _is_blank(header)]


def parse_csv_rows(text):
    """Return ``(rows, columns, headers)`` for delimited text with a header row."""
    reader = csv.reader(io.StringIO(text))
    return _rows_to_records(reader)


def load_sheet_rows(worksheet):
    return _rows_to_records(worksheet.iter_rows(values_only=True))


def validate_columns(source, columns, headers):
    missing = REQUIRED_COLUMNS[source] - set(columns)
    if missing:
        raise SchemaViolationError(source, missing, headers)


def _build_sale(row):
    sku = _clean_text(row.get("sku"))
    channel = _clean_text(row.get("channel"))
    if not sku or not channel:
        return None
    return SaleRecord(
        channel=channel,
        sku=sku,
        quantity=to_quantity(row.get("quantity")),
        warehouse_id=_clean_text(row.get("warehouse_id")) or "",
        central_sku=_clean_text(row.get("central_sku")) or "",
        style_id=_clean_text(row.get("style_id")) or "",
        date=_clean_date(row.get("date")),
        channel_id=_clean_text(row.get("channel_id")),
        fulfillment_type=_clean_text(row.get("fulfillment_type")),
        size=_clean_text(row.get("size")),
    )


def _build_fc_stock(row):
    channel = _clean_text(row.get("channel"))
    warehouse_id = _clean_text(row.get("warehouse_id"))
    sku = _clean_text(row.get("sku"))
    if not channel or not warehouse_id or not sku:
        return None
    return WarehouseStockRecord(
        channel=channel,
        warehouse_id=warehouse_id,
        sku=sku,
        quantity=to_quantity(row.get("quantity")),
        channel_id=_clean_text(row.get("channel_id")),
    )


def _build_central_stock(row):
    central_sku = _clean_text(row.get("central_sku"))
    if not central_sku:
        return None
    return CentralStockRecord(central_sku=central_sku, quantity=to_quantity(row.get("quantity")))


def _build_remark(row):
    style_id = _clean_text(row.get("style_id"))
    if not style_id:
        return None
    return CatalogRemark(
        style_id=style_id,
        company_remark=_clean_text(row.get("company_remark")) or "",
        category=_clean_text(row.get("category")),
    )


_RECORD_BUILDERS = {
    SALES: _build_sale,
    FC_STOCK: _build_fc_stock,
    CENTRAL_STOCK: _build_central_stock,
    REMARKS: _build_remark,
}


def build_records(source, rows, columns, headers):
    validate_columns(source, columns, headers)
    builder = _RECORD_BUILDERS[source]
    records = []
    skipped = 0
    for row in rows:
        record = builder(row)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    logger.info(
        "Loaded %d %s rows (%d skipped)",
        len(records),
        source,
        skipped,
        extra={"source": source},
    )
    return tuple(records)


def is_url(location):
    parsed = urlparse(str(location))
    return parsed.scheme.lower() in _ALLOWED_HTTP_SCHEMES and bool(parsed.netloc)


def _fetch_url(source, url, timeout):
    req = request.Request(url, headers={"Accept": "text/csv, text/plain, */*"})
    try:
        with request.urlopen(req, timeout=timeout) as response:  # nosec B310
            status_code = response.getcode()
            if status_code < 200 or status_code >= 300:
                raise SourceFetchError(source, "HTTP {}".format(status_code))
            content_type = response.headers.get("Content-Type", "")
            body = response.read()
    except error.HTTPError as exc:
        raise SourceFetchError(source, "HTTP {}".format(exc.code)) from exc
    except error.URLError as exc:
        raise SourceFetchError(source, exc.reason) from exc
    except OSError as exc:
        raise SourceFetchError(source, exc) from exc

    if "text/html" in content_type.lower():
        raise SourceFormatError(source, "received an HTML page instead of CSV")
    return body


def _decode_text(source, body):
    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SourceFormatError(source, "not UTF-8 text") from exc


def read_source_text(source, location, timeout=30):
    if is_url(location):
        body = _fetch_url(source, location, timeout)
    else:
        try:
            body = Path(location).read_bytes()
        except OSError as exc:
            raise SourceFetchError(source, exc) from exc
    text = _decode_text(source, body)
    if looks_like_html(text):
        raise SourceFormatError(source, "received an HTML page instead of CSV")
    return text


def load_source(source, location, timeout=30):
    text = read_source_text(source, location, timeout)
    rows, columns, headers = parse_csv_rows(text)
    return build_records(source, rows, columns, headers)


def _find_sheet(workbook, source):
    sheet_map = {normalize_sheet_name(name): name for name in workbook.sheetnames}
    for alias in SHEET_ALIASES[source]:
        actual_name = sheet_map.get(alias)
        if actual_name:
            return workbook[actual_name]
    raise SourceFormatError(
        source,
        "sheet not found in workbook (sheets: {})".format(", ".join(workbook.sheetnames)),
    )


def load_workbook_inputs(path):
    workbook = load_workbook(filename=str(path), read_only=True, data_only=True)
    try:
        collections = {}
        for source in SOURCE_NAMES:
            rows, columns, headers = load_sheet_rows(_find_sheet(workbook, source))
            collections[source] = build_records(source, rows, columns, headers)
    finally:
        workbook.close()
    return PlanningInputs(**collections)


def configured_sources(settings=None, overrides=None):
    """Map each source to its location; ``overrides`` win over settings."""
    settings = settings or get_settings()
    overrides = overrides or {}
    sources = {}
    for source in SOURCE_NAMES:
        setting_name = SOURCE_SETTING_NAMES[source]
        location = (overrides.get(source) or getattr(settings, setting_name) or "").strip()
        if not location:
            raise ValueError("{} is not configured".format(setting_name))
        sources[source] = location
    return sources


def load_planning_inputs(sources=None, workbook=None, timeout=None):
    """Load all four input collections, or fail without partial results.

    Explicit ``sources`` win over ``workbook``; with neither, the configured
    workbook is used when set, else the four configured sources.
    """
    settings = get_settings()
    if timeout is None:
        timeout = settings.SOURCE_TIMEOUT_SECONDS
    if sources is None:
        workbook = workbook or settings.SOURCE_WORKBOOK
        if workbook:
            return load_workbook_inputs(workbook)
        sources = configured_sources(settings)

    missing = [source for source in SOURCE_NAMES if not sources.get(source)]
    if missing:
        raise ValueError("Missing input sources: {}".format(", ".join(missing)))

    with ThreadPoolExecutor(max_workers=len(SOURCE_NAMES)) as pool:
        futures = {
            source: pool.submit(load_source, source, sources[source], timeout)
            for source in SOURCE_NAMES
        }
        collections = {source: future.result() for source, future in futures.items()}
    return PlanningInputs(**collections)
