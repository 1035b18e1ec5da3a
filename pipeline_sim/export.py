"""
Chad 2030 Pipeline Simulator — Excel Export
Writes one or more scenarios (controls + outputs) to an .xlsx workbook.
"""
import io
import os
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from pipeline_sim.formatters import format_currency, format_months, format_percent

HEADER_FONT = Font(bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='7A1F3D', end_color='7A1F3D', fill_type='solid')
THIN_BORDER = Border(left=Side(style='thin'), right=Side(style='thin'),
                     top=Side(style='thin'), bottom=Side(style='thin'))


def ws_write(ws, headers, rows):
    for c, h in enumerate(headers, 1):
        cell = ws.cell(row=1, column=c, value=h)
        cell.font = HEADER_FONT; cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center'); cell.border = THIN_BORDER
    for r, row in enumerate(rows, 2):
        for c, val in enumerate(row, 1):
            ws.cell(row=r, column=c, value=val).border = THIN_BORDER
    for col in ws.columns:
        ml = max(len(str(cell.value or '')) for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(ml + 2, 40)


def build_workbook(scenarios):
    """scenarios: list of {'name', 'controls', 'outputs'}; detail sheets use the first."""
    if not scenarios:
        raise ValueError('at least one scenario is required for export')
    wb = openpyxl.Workbook()

    ws = wb.active; ws.title = 'Summary'
    ws_write(ws, ['Scenario', 'Active', 'Advisor', 'PMU Add', 'Champions', 'Gov/PPP/Private',
                  'Oil $/bbl', 'Risk', 'FIDs', 'Investment', 'Co-Financing', 'Avg Time',
                  'Fiscal', 'Capacity', 'Breach Year', 'Warning'], [
        [s['name'], c['nActive'], 'Yes' if c['advisor'] else 'No', c['pmuAdd'], c['nChampion'],
         f"{c['pctGovLed']}/{c['pctPPP']}/{c['pctPrivate']}", c['oilPrice'], c['politicalRisk'],
         o['nFid'], format_currency(o['investmentTotal']), format_currency(o['cofinancingTotal']),
         format_months(o['avgTimeToFid']), o['fiscalStatus'], o['capacityStatus'],
         o['breachYear'] or '', o['boundsWarning'] or '']
        for s in scenarios for c, o in [(s['controls'], s['outputs'])]
    ])

    first = scenarios[0]['outputs']
    ws2 = wb.create_sheet('Fiscal By Year')
    ws_write(ws2, ['Year', 'Revenue', 'Oil', 'Non-Oil', 'Donor', 'Fiscal Space', 'Binding',
                   'Co-Fin Demand', 'Debt/GDP', 'NOPD', 'NOPD Target', 'Status'], [
        [f['year'], round(f['revenue'], 1), round(f['oilRevenue'], 1), round(f['nonOilRevenue'], 1),
         round(f['donorGrants'], 1), round(f['fiscalSpace'], 1), f.get('bindingConstraint', ''),
         round(f['cofinancingDemand'], 1), format_percent(f['debtRatio'], 1),
         format_percent(f['nopdActual'], 1), format_percent(f['nopdTarget'], 1), f['fiscalStatus']]
        for f in first['fiscalByYear']
    ])

    ws3 = wb.create_sheet('Pipeline By Year')
    ws_write(ws3, ['Year', 'FIDs', 'Cumulative', 'Dropped', 'In Flight', 'Investment',
                   'Private', 'Gov Co-Fin'], [
        [p['year'], p['fids'], p['cumulativeFids'], p['dropped'], p['inFlight'],
         round(p['investmentMobilized'], 1), round(p['privateCapital'], 1), round(p['govCofinancing'], 1)]
        for p in first['pipelineByYear']
    ])

    ws4 = wb.create_sheet('Drops By Gate')
    ws_write(ws4, ['Gate', 'Dropped'], [[f"Gate {g}", n] for g, n in sorted(first['dropsByGate'].items(),
                                                                         key=lambda kv: int(kv[0]))])
    return wb


def save_workbook(scenarios, path):
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    build_workbook(scenarios).save(path)
    return path


def workbook_bytes(scenarios):
    buf = io.BytesIO()
    build_workbook(scenarios).save(buf)
    buf.seek(0)
    return buf
