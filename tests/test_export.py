import openpyxl
import pytest

from pipeline_sim.export import build_workbook, save_workbook
from pipeline_sim.presets import generate_presets


def test_workbook_sheets():
    wb = build_workbook(generate_presets())
    assert wb.sheetnames == ['Summary', 'Fiscal By Year', 'Pipeline By Year', 'Drops By Gate']
    summary = wb['Summary']
    assert summary.cell(row=1, column=1).value == 'Scenario'
    assert summary.cell(row=2, column=1).value == 'Baseline (DIY)'
    assert summary.max_row == 6
    assert wb['Fiscal By Year'].max_row == 7
    assert wb['Drops By Gate'].cell(row=2, column=1).value == 'Gate 2'


def test_save_round_trip(tmp_path):
    path = save_workbook(generate_presets()[:1], str(tmp_path / 'out' / 'pipeline.xlsx'))
    wb = openpyxl.load_workbook(path)
    assert wb['Summary'].cell(row=2, column=9).value == generate_presets()[0]['outputs']['nFid']


def test_nothing_to_export():
    with pytest.raises(ValueError):
        build_workbook([])
