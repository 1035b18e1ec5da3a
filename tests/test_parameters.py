import pytest

from pipeline_sim.parameters import (
    PARAMETERS, MODALITIES, ACTIVE_STAGES, ACTIVE_GATES, TOTAL_BASELINE_DURATION,
    BASELINE_CAPACITY, modality_weights,
)


def test_portfolio_literals():
    init = PARAMETERS['init']
    assert init['nProjects'] == 268
    assert init['capexAvg'] == 76
    assert init['nTier1'] + init['nTier2'] + init['nTier3'] == init['nProjects']


def test_every_stage_and_gate_parameterised():
    for m in MODALITIES:
        mod = PARAMETERS['modalities'][m]
        assert sorted(mod['durationMultipliers']) == ACTIVE_STAGES
        assert sorted(mod['passRateAdjustments']) == ACTIVE_GATES
        assert sorted(PARAMETERS['stageCosts'][m]) == ACTIVE_STAGES


def test_gate_floors_below_ceilings():
    for g in ACTIVE_GATES:
        cfg = PARAMETERS['gates'][g]
        assert cfg['floor'] <= cfg['baseRate'] <= cfg['ceiling']


def test_derived_constants():
    assert TOTAL_BASELINE_DURATION == 33.0
    assert BASELINE_CAPACITY == 25


def test_modality_weights(controls):
    assert modality_weights(controls) == [('GOV_LED', 0.4), ('PPP', 0.4), ('FULLY_PRIVATE', 0.2)]
    assert sum(w for _, w in modality_weights(controls)) == pytest.approx(1.0)
