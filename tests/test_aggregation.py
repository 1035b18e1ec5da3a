import pytest

from pipeline_sim.aggregation import (
    round_half_up, distribute_fids_across_years, distribute_fids_by_modality,
    calculate_investment_mobilized, distribute_cofinancing_by_year, calculate_drops_by_gate,
    calculate_average_time_to_fid, calculate_preparation_cost, generate_pipeline_data,
)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.49) == 2


def test_ramp_up_distribution():
    assert distribute_fids_across_years(100, 12) == {
        2025: 0, 2026: 7, 2027: 13, 2028: 20, 2029: 27, 2030: 33}


def test_default_run_distribution():
    assert distribute_fids_across_years(9, 47.3) == {
        2025: 0, 2026: 0, 2027: 0, 2028: 0, 2029: 3, 2030: 6}


def test_long_preparation_lands_in_final_year():
    result = distribute_fids_across_years(7, 100)
    assert result[2030] == 7
    assert sum(result.values()) == 7


@pytest.mark.parametrize('total', [0, 1, 13, 57, 171])
def test_distribution_conserves_total(total):
    assert sum(distribute_fids_across_years(total, 30).values()) == total


def test_modality_split_absorbs_remainder(controls):
    assert distribute_fids_by_modality(9, controls) == {'GOV_LED': 4, 'PPP': 4, 'FULLY_PRIVATE': 1}


def test_investment(controls):
    inv = calculate_investment_mobilized(10, controls)
    assert inv['total'] == 760
    # 4 GOV_LED, 4 PPP, 2 FULLY_PRIVATE
    assert inv['govCofinancing'] == pytest.approx(4 * 76 + 4 * 76 * 0.3)
    assert inv['private'] == pytest.approx(760 - inv['govCofinancing'])
    assert inv['contingentLiabilities'] == pytest.approx(4 * 76 * 0.125 + 2 * 76 * 0.05)


def test_cofinancing_by_year(controls):
    result = distribute_cofinancing_by_year({2029: 3, 2030: 6}, controls)
    assert result[2025] == 0.0
    assert result[2030] == pytest.approx(2 * 76 + 2 * 76 * 0.3)


def test_drops_by_gate():
    drops = calculate_drops_by_gate(100, {g: 0.5 for g in (2, 3, 4, 5, 6)})
    assert drops['byGate'] == {2: 50, 3: 25, 4: 13, 5: 6, 6: 3}
    assert drops['total'] == 97
    assert drops['survivors'] == pytest.approx(3.125)


def test_average_time_to_fid():
    assert calculate_average_time_to_fid({2: 1, 3: 2, 4: 3, 5: 4, 6: 5}) == 15


def test_preparation_cost(controls):
    controls.update({'pctGovLed': 0, 'pctPPP': 100, 'pctPrivate': 0})
    cost = calculate_preparation_cost(10, {'total': 4}, controls)
    assert cost['byModality']['PPP'] == pytest.approx(6.22)
    assert cost['droppedCost'] == pytest.approx(1.0)
    assert cost['total'] == pytest.approx(7.22)


def test_pipeline_table(controls):
    rows = generate_pipeline_data(9, 41, 50, 47.3, controls)
    assert [r['fids'] for r in rows] == [0, 0, 0, 0, 3, 6]
    assert rows[-1]['cumulativeFids'] == 9
    assert all(r['inFlight'] >= 0 for r in rows)
    assert rows[-1]['investmentMobilized'] == 6 * 76


def test_pipeline_table_without_fids(controls):
    rows = generate_pipeline_data(0, 50, 50, 40, controls)
    assert all(r['fids'] == 0 and r['dropped'] == 0 for r in rows)
    assert rows[0]['inFlight'] == 50
