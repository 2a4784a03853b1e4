"""
Static reference data: the planning tables and their composite identifier seeds.

Ledger codes (category_code) are the backend's costtypes / earnings ids;
composite ids are the businesscosts / businessearnings ids the bulk endpoints
expect.
"""

from plan_logics.taxonomy import (
    GRANDTOTAL, ITEM, SECTION, SUBTOTAL, TITLE,
    LineItem, SeedEntry, TableDefinition,
)


COST_LOAD_PATH = '/business-plan/{plan_id}/costs?branch_id={branch_id}'
COST_SAVE_PATH = '/business-plan/{plan_id}/costs/bulk'
EARNING_LOAD_PATH = '/business-plan/{plan_id}/earnings?branch_id={branch_id}'
EARNING_SAVE_PATH = '/business-plan/{plan_id}/earnings/bulk'


# ── Procurement business expenses (business group 1) ──────────

PROCUREMENT_GROUP_ID = 1

_PROCUREMENT_LABELS = [
    "Selling expenses",
    "Trading premises expenses",
    "Doubtful debts - trade receivables",
    "Sales promotion",
    "Loss on inventory write-down",
    "Salaries and wages",
    "Holiday work",
    "Insurance premiums",
    "Repairs - equipment",
    "Vehicle expenses",
    "Photocopying",
    "Fuel used",
    "Telephone",
    "Bank transfer fees",
    "Electricity",
    "Interest paid - agricultural bank",
    "Depreciation - equipment",
    "Depreciation - buildings",
    "Depreciation - vehicles",
    "Staff incentives",
    "Water supply",
    "Fuel",
    "Public relations",
    "Damaged goods",
    "Office supplies",
    "Member services",
    "Repairs - vehicles",
    "Goods handling",
    "Credit card transfer fees",
    "Repairs - buildings",
    "Doubtful debts - agency notes",
    "Doubtful debts - farmer card",
    "Stationery and printing",
    "Property tax",
    "Miscellaneous expenses",
]

# businesscosts.id 1..35 <-> cost_id 2..36
PROCUREMENT_SEED = tuple(
    SeedEntry(composite_id=cost_id - 1, category_code=cost_id, group_id=PROCUREMENT_GROUP_ID)
    for cost_id in range(2, 2 + len(_PROCUREMENT_LABELS))
)

PROCUREMENT_EXPENSES = TableDefinition(
    table_code='BUSINESS_PLAN_EXPENSES',
    title="Business plan expenses - procurement",
    rows=(
        LineItem("3", "Procurement business expenses", SECTION),
        *(
            LineItem(f"3.{n}", label, ITEM, category_code=n + 1, group_id=PROCUREMENT_GROUP_ID)
            for n, label in enumerate(_PROCUREMENT_LABELS, start=1)
        ),
        LineItem("3.T", "Total procurement expenses", SUBTOTAL),
    ),
    id_field='business_cost_id',
    load_path=COST_LOAD_PATH,
    save_path=COST_SAVE_PATH,
    seed=PROCUREMENT_SEED,
)


# ── Support work expenses ─────────────────────────────────────

SUPPORT_GROUP_ID = 8

_SUPPORT_LABELS = [
    "Salaries and wages",
    "Board meeting allowances",
    "Board travel allowances",
    "Staff per diem",
    "Holiday work",
    "Entertainment",
    "Staff incentives",
    "Stationery and printing",
    "General assembly expenses",
    "Depreciation - buildings",
    "Depreciation - vehicles",
    "Depreciation - equipment",
    "Repairs - buildings",
    "Water supply",
    "Interest paid - staff savings",
    "Electricity",
    "Telephone",
    "Office supplies",
    "Staff welfare",
    "Social security contributions",
    "Workmen's compensation fund",
    "Vehicle expenses",
    "Insurance premiums",
    "Office materials",
    "Board uniforms",
    "Board meeting expenses",
    "Fuel used - 4 wheel",
    "Village representative meetings",
    "Repairs - equipment",
    "Bank transfer fees",
    "Loss on building retirement",
    "Fuel - 4 wheel",
    "Community relations",
    "Accounting advisory fees",
    "Auditor fees",
    "Position allowances",
    "Repairs - vehicles",
    "Association gifts",
    "Landscaping",
    "Pass-through expenses",
    "Housekeeping and kitchen",
    "Public relations",
    "Member services",
    "Property tax",
    "Member data stationery",
    "Office cleaning",
    "Office security",
    "Study visits",
    "Position expenses",
    "Miscellaneous expenses",
]

# "Fuel - 4 wheel" (9.32) is booked on the same ledger code as
# "Fuel used - 4 wheel" (9.27); it is told apart only by its pinned composite id.
_FUEL_LEDGER_CODE = 127
_UNMAPPED_SUPPORT_ROWS = {24}
_SHARED_LEDGER_ROWS = {32: 332}


def _support_row(n, label):
    code = f"9.{n}"
    if n in _SHARED_LEDGER_ROWS:
        return LineItem(code, label, ITEM, category_code=_FUEL_LEDGER_CODE, group_id=SUPPORT_GROUP_ID,
                        composite_id_override=_SHARED_LEDGER_ROWS[n])
    return LineItem(code, label, ITEM, category_code=100 + n, group_id=SUPPORT_GROUP_ID)


SUPPORT_SEED = tuple(
    SeedEntry(composite_id=300 + n, category_code=100 + n, group_id=SUPPORT_GROUP_ID)
    for n in range(1, len(_SUPPORT_LABELS) + 1)
    if n not in _UNMAPPED_SUPPORT_ROWS and n not in _SHARED_LEDGER_ROWS
)

SUPPORT_WORK_EXPENSES = TableDefinition(
    table_code='BUSINESS_PLAN_EXPENSES_SUPPORT_WORK',
    title="Support work expenses",
    rows=(
        LineItem("9", "Support work expenses", SECTION),
        *(_support_row(n, label) for n, label in enumerate(_SUPPORT_LABELS, start=1)),
        LineItem("9.T", "Total support work expenses", SUBTOTAL),
    ),
    id_field='business_cost_id',
    load_path=COST_LOAD_PATH,
    save_path=COST_SAVE_PATH,
    seed=SUPPORT_SEED,
)


# ── Fuel station procurement costs (business group 2) ─────────

OIL_GROUP_ID = 2

# no businesscosts ids are published for group 2 yet, so both rows stay unmapped
OIL_EXPENSES = TableDefinition(
    table_code='BUSINESS_PLAN_EXPENSES_OIL',
    title="Business plan expenses - fuel station",
    rows=(
        LineItem("1", "Cost of sales - fuel station procurement", SECTION),
        LineItem("1.1", "Purchase expenses", ITEM, category_code=2, group_id=OIL_GROUP_ID),
        LineItem("1.2", "Less goods drawn for own use", ITEM, category_code=46, group_id=OIL_GROUP_ID),
        LineItem("1.T", "Total fuel station procurement", SUBTOTAL),
    ),
    id_field='business_cost_id',
    load_path=COST_LOAD_PATH,
    save_path=COST_SAVE_PATH,
)


# ── Processing business expenses ──────────────────────────────

_PROCESSING_LABELS = [
    ("6.1", "Selling expenses"),
    ("6.2", "Selling expenses - inspection"),
    ("6.3", "Interest on staff savings"),
    ("6.4", "Inventory shortage allowance"),
    ("6.5", "Salaries and wages"),
    ("6.5b", "Allowances"),
    ("6.6", "Holiday work"),
    ("6.7", "Sales promotion"),
    ("6.8", "Vehicle expenses"),
    ("6.9", "Fuel"),
    ("6.10", "Telephone"),
    ("6.11", "Office supplies"),
    ("6.12", "Insurance premiums"),
    ("6.13", "Depreciation - equipment"),
    ("6.14", "Depreciation - buildings"),
    ("6.15", "Depreciation - vehicles"),
    ("6.16", "Depreciation - machinery"),
    ("6.17", "Stationery and printing"),
    ("6.18", "Relocation expenses"),
    ("6.19", "Doubtful debts - trade receivables"),
    ("6.20", "Staff welfare"),
    ("6.21", "Housekeeping and kitchen"),
    ("6.22", "Staff allowances"),
    ("6.23", "Maintenance - loaders and vehicles"),
    ("6.24", "Maintenance - equipment"),
    ("6.25", "Social security contributions"),
    ("6.26", "Bank transfer fees"),
    ("6.27", "Association gifts"),
    ("6.28", "Entertainment"),
    ("6.29", "Member services"),
    ("6.30", "Community activities"),
    ("6.31", "Repairs - buildings"),
    ("6.32", "Board allowances"),
    ("6.33", "Property tax"),
    ("6.34", "Standards compliance"),
    ("6.35", "Communication expenses"),
    ("6.36", "International memberships"),
    ("6.37", "Supplies used"),
    ("6.38", "Electricity"),
    ("6.39", "Advertising"),
    ("6.40", "Mill shift staff"),
    ("6.41", "Landscaping"),
    ("6.42", "Software licences"),
    ("6.45", "Miscellaneous expenses"),
]

# ledger codes for the processing and service groups are not assigned yet
PROCESSING_EXPENSES = TableDefinition(
    table_code='BUSINESS_PLAN_EXPENSES_PROCESSING',
    title="Business plan expenses - processing",
    rows=(
        LineItem("6", "Processing business expenses", SECTION),
        *(LineItem(code, label, ITEM) for code, label in _PROCESSING_LABELS),
        LineItem("6.T", "Total processing expenses", SUBTOTAL),
    ),
    id_field='business_cost_id',
    load_path=COST_LOAD_PATH,
    save_path=COST_SAVE_PATH,
)


# ── Service business expenses ─────────────────────────────────

_SERVICE_LABELS = [
    ("8.1", "Salaries and wages"),
    ("8.2", "Holiday work allowances"),
    ("8.3", "Stationery and printing"),
    ("8.4", "Office supplies"),
    ("8.5", "Office materials"),
    ("8.6", "Telephone"),
    ("8.7", "Electricity"),
    ("8.8", "Vehicle expenses"),
    ("8.9", "Repairs - equipment"),
    ("8.10", "Depreciation - equipment"),
    ("8.11", "Depreciation - buildings"),
    ("8.12", "Staff signage"),
    ("8.13", "Landscaping"),
    ("8.14", "Staff welfare"),
    ("8.15", "Fuel"),
    ("8.16", "Position allowances"),
    ("8.17", "Housekeeping and kitchen"),
    ("8.18", "Insurance premiums"),
    ("8.19", "Repairs - buildings"),
    ("8.20", "Repairs - vehicles"),
    ("8.21", "Bank transfer fees"),
    ("8.23", "Social security contributions"),
    ("8.24", "Property tax"),
    ("8.25", "Association gifts"),
    ("8.26", "Office cleaning"),
    ("8.27", "Miscellaneous expenses"),
]

SERVICE_EXPENSES = TableDefinition(
    table_code='BUSINESS_PLAN_EXPENSES_SERVICE',
    title="Business plan expenses - service",
    rows=(
        LineItem("8", "Service business expenses", SECTION),
        *(LineItem(code, label, ITEM) for code, label in _SERVICE_LABELS),
        LineItem("8.T", "Total service expenses", SUBTOTAL),
    ),
    id_field='business_cost_id',
    load_path=COST_LOAD_PATH,
    save_path=COST_SAVE_PATH,
)


# ── Revenue by business (groups 1..6) ─────────────────────────

_REVENUE_SECTIONS = [
    ("Procurement business revenue", "Total procurement", [
        "Procurement commission", "Sales promotion income", "Interest - trade receivables",
        "Gain on inventory revaluation", "Outstanding cooperative award", "Miscellaneous income",
    ]),
    ("Procurement - fuel station revenue", "Total fuel station", [
        "Quality award", "Sales promotion income", "Member service income", "Miscellaneous income",
    ]),
    ("Collection business revenue", "Total collection", [
        "Service income", "Deferred sales income", "Paddy quality export income", "Sack income",
        "Central market service fees", "Insurance interest compensation", "Subsidy income",
        "Miscellaneous income",
    ]),
    ("Processing business revenue", "Total processing", [
        "Gain on inventory revaluation", "Deposit interest", "Truck income", "Deferred sales project income",
        "Milling service income", "Sack income", "Insurance interest compensation",
        "Subsidy - milled rice sales", "Subsidy - machinery purchase", "Paddy quality inspection income",
        "Miscellaneous income",
    ]),
    ("Seed processing revenue", "Total seed processing", [
        "Seed shortage compensation", "Truck income", "Deferred sales project income",
        "Seed production subsidy", "Farmer income", "Gain on inventory revaluation", "Miscellaneous income",
    ]),
    ("Savings centre revenue", "Total savings centre", [
        "Deposit interest", "Management fees", "Miscellaneous income",
    ]),
]


def _build_revenue():
    rows = [LineItem("REV", "Specific revenue by business", TITLE)]
    seed = []
    composite_id = 1
    for s, (section_label, subtotal_label, items) in enumerate(_REVENUE_SECTIONS, start=1):
        rows.append(LineItem(str(s), section_label, SECTION))
        for n, label in enumerate(items, start=1):
            earning_code = 100 * s + n
            rows.append(LineItem(f"{s}.{n}", label, ITEM, category_code=earning_code, group_id=s))
            seed.append(SeedEntry(composite_id=composite_id, category_code=earning_code, group_id=s))
            composite_id += 1
        rows.append(LineItem(f"{s}.T", subtotal_label, SUBTOTAL))
    rows.append(LineItem("G.T", "Total revenue", GRANDTOTAL))
    return tuple(rows), tuple(seed)


_REVENUE_ROWS, REVENUE_SEED = _build_revenue()

REVENUE_BY_BUSINESS = TableDefinition(
    table_code='BUSINESS_PLAN_REVENUE_BY_BUSINESS',
    title="Specific revenue by business",
    rows=_REVENUE_ROWS,
    id_field='business_earning_id',
    load_path=EARNING_LOAD_PATH,
    save_path=EARNING_SAVE_PATH,
    seed=REVENUE_SEED,
)


# ── Other income (business group 7) ──────────────────────────

OTHER_INCOME_GROUP_ID = 7

OTHER_INCOME_SEED = (
    SeedEntry(37, 6, OTHER_INCOME_GROUP_ID),
    SeedEntry(38, 29, OTHER_INCOME_GROUP_ID),
    SeedEntry(39, 28, OTHER_INCOME_GROUP_ID),
    SeedEntry(40, 27, OTHER_INCOME_GROUP_ID),
    SeedEntry(41, 26, OTHER_INCOME_GROUP_ID),
    SeedEntry(42, 25, OTHER_INCOME_GROUP_ID),
    SeedEntry(43, 24, OTHER_INCOME_GROUP_ID),
    SeedEntry(44, 22, OTHER_INCOME_GROUP_ID),
)

OTHER_INCOME = TableDefinition(
    table_code='BUSINESS_PLAN_OTHER_INCOME',
    title="Other income",
    rows=(
        LineItem("OTHER", "Other income estimate", TITLE),
        LineItem("2", "Other income", SECTION),
        LineItem("2.1", "Bank deposit interest", ITEM, category_code=22, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.2", "Entrance fees", ITEM, category_code=24, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.3", "Shareholding returns", ITEM, category_code=25, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.4", "Investment prizes", ITEM, category_code=26, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.5", "Government grants", ITEM, category_code=27, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.6", "Recognised income", ITEM, category_code=28, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.7", "Tender document sales", ITEM, category_code=29, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.8", "Miscellaneous income", ITEM, category_code=6, group_id=OTHER_INCOME_GROUP_ID),
        LineItem("2.T", "Total other income", SUBTOTAL),
    ),
    id_field='business_earning_id',
    load_path=EARNING_LOAD_PATH,
    save_path=EARNING_SAVE_PATH,
    seed=OTHER_INCOME_SEED,
)


ALL_TABLES = {
    t.table_code: t
    for t in (
        PROCUREMENT_EXPENSES, SUPPORT_WORK_EXPENSES, OIL_EXPENSES, PROCESSING_EXPENSES,
        SERVICE_EXPENSES, REVENUE_BY_BUSINESS, OTHER_INCOME,
    )
}
