"""Shared fixtures for the pipeline simulator tests."""
import pytest

from pipeline_sim.controls import DEFAULT_CONTROLS
from pipeline_sim.scenarios import ScenarioStore


@pytest.fixture
def controls():
    return dict(DEFAULT_CONTROLS)


@pytest.fixture
def store(tmp_path):
    return ScenarioStore(str(tmp_path / 'scenarios.json'))


@pytest.fixture
def client(tmp_path):
    import app as app_module

    app_module.app.config['SCENARIO_STORE'] = str(tmp_path / 'scenarios.json')
    app_module.app.config['TESTING'] = True
    app_module.STATE.update({'controls': dict(DEFAULT_CONTROLS), 'outputs': None,
                             'lastRunMs': 0.0, 'error': None})
    with app_module.app.test_client() as c:
        yield c
