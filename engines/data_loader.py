"""
Hawaii Growth Calculator: Reference Table Loader
Reads optional row overrides from data/config/reference_tables.xlsx once at start-up.
Sheets (all optional): Industries, Company Sizes, Budgets, Market Factors.
Missing file or sheet → built-in tables from reference_tables.py.
"""
import os, logging
import openpyxl
from engines.reference_tables import default_tables

# Workbook header -> table field
INDUSTRY_COLUMNS = {
    'Tech Spend %': 'techSpendPercent', 'Efficiency Potential': 'efficiencyPotential',
    'Avg Savings %': 'avgSavingsPercent', 'Implementation Months': 'implementationMonths',
}
SIZE_COLUMNS = {
    'Cost Multiplier': 'cost', 'Complexity Multiplier': 'complexity',
    'Timeline Multiplier': 'timeline', 'Base Spend': '_baseSpend',
}
FACTOR_NAMES = {
    'Cost Premium': 'costPremium', 'Implementation Speed': 'implementationSpeed',
    'Local Support Value': 'localSupportValue', 'Remote Work Adoption': 'remoteWorkAdoption',
    'Tourism Dependency': 'tourismDependency', 'Overhead Multiplier': 'overheadMultiplier',
    'Labor Cost Premium': 'laborCostPremium',
}


def read_xlsx_sheet(filepath, sheet_name=None):
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    try:
        if sheet_name and sheet_name not in wb.sheetnames:
            return []
        ws = wb[sheet_name] if sheet_name else wb.active
        rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()
    if len(rows) < 2:
        return []
    headers = [str(h).strip() if h else f'col_{i}' for i, h in enumerate(rows[0])]
    return [dict(zip(headers, row)) for row in rows[1:] if any(v is not None for v in row)]


def _num(val):
    if val is None or val == '':
        return None
    if isinstance(val, str):
        val = val.strip()
        scale = 100 if val.endswith('%') else 1
        try:
            return float(val.rstrip('%').strip()) / scale
        except ValueError:
            return None
    return float(val)


def load_reference_tables(path=None):
    """Built-in tables with any workbook rows layered on top."""
    tables = default_tables()
    if not path or not os.path.exists(path):
        return tables

    n = 0
    for row in read_xlsx_sheet(path, 'Industries'):
        name = str(row.get('Industry') or '').strip()
        if not name: continue
        entry = tables['industries'].setdefault(name, dict(tables['industries']['Other']))
        for col, field in INDUSTRY_COLUMNS.items():
            v = _num(row.get(col))
            if v is not None:
                entry[field] = int(v) if field == 'implementationMonths' else v
        n += 1

    for row in read_xlsx_sheet(path, 'Company Sizes'):
        size = str(row.get('Company Size') or '').strip()
        if not size: continue
        entry = tables['sizes'].setdefault(size, dict(tables['sizes']['1-10']))
        for col, field in SIZE_COLUMNS.items():
            v = _num(row.get(col))
            if v is None: continue
            if field == '_baseSpend':
                tables['sizeBaseSpend'][size] = v
            else:
                entry[field] = v
        n += 1

    for row in read_xlsx_sheet(path, 'Budgets'):
        budget = str(row.get('Budget Range') or '').strip()
        if not budget: continue
        entry = tables['budgets'].setdefault(budget, {'solutionName': budget, 'features': [], 'monthlyInvestment': 0})
        if row.get('Solution'):
            entry['solutionName'] = str(row['Solution']).strip()
        inv = _num(row.get('Monthly Investment'))
        if inv is not None:
            entry['monthlyInvestment'] = max(0, inv)
        if row.get('Features'):
            entry['features'] = [f.strip() for f in str(row['Features']).split(';') if f.strip()]
        n += 1

    for row in read_xlsx_sheet(path, 'Market Factors'):
        key = str(row.get('Parameter') or '').strip()
        v = _num(row.get('Value'))
        if key in FACTOR_NAMES and v is not None:
            tables['marketFactors'][FACTOR_NAMES[key]] = v
            n += 1

    logging.info(f"Reference tables: {n} override row(s) applied from {os.path.basename(path)}")
    return tables
