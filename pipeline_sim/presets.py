"""
Chad 2030 Pipeline Simulator — Preset Scenarios
Five fixed control configurations, computed on demand and packaged as
read-only saved scenarios.
"""
from pipeline_sim.controls import DEFAULT_CONTROLS
from pipeline_sim.simulation import run_simulation

PRESET_EPOCH = '1970-01-01T00:00:00.000Z'

PRESET_CONFIGS = [
    {'name': 'Baseline (DIY)', 'description': 'Default configuration with no interventions',
     'controls': {'advisor': False, 'pmuAdd': 0, 'nChampion': 0}},
    {'name': 'With Advisor', 'description': 'Transaction advisor enabled',
     'controls': {'advisor': True, 'pmuAdd': 0, 'nChampion': 0}},
    {'name': 'Max Capacity', 'description': 'Full resources: Advisor + PMU + Champions',
     'controls': {'advisor': True, 'pmuAdd': 15, 'nChampion': 20}},
    {'name': 'Fiscal Safe', 'description': 'PPP-heavy modality to stay green',
     'controls': {'advisor': True, 'pctGovLed': 40, 'pctPPP': 50, 'pctPrivate': 10}},
    {'name': 'Oil Shock', 'description': 'Stress test at $50/bbl',
     'controls': {'oilPrice': 50}},
]


def generate_presets():
    presets = []
    for i, cfg in enumerate(PRESET_CONFIGS):
        controls = dict(DEFAULT_CONTROLS)
        controls.update(cfg['controls'])
        result = run_simulation(controls)
        presets.append({
            'id': f"preset_{i}",
            'name': cfg['name'],
            'description': cfg['description'],
            'createdAt': PRESET_EPOCH,
            'controls': controls,
            'outputs': result['outputs'],
            'isPreset': True,
        })
    return presets


def get_preset_by_name(name):
    for p in generate_presets():
        if p['name'] == name:
            return p
    return None
