"""
Chad 2030 Pipeline Simulator — Stage Duration Engine
Expected months-in-stage per project:

  DURATION[s] = BASE[s] × MODALITY × ADVISOR × PMU × CHAMPION × CAPACITY × RISK

floored at 1 month. The portfolio-wide figure is the modality-weighted
total for non-championed projects.
"""
from pipeline_sim.parameters import (
    PARAMETERS, ACTIVE_STAGES, MAX_PMU_ADD, modality_weights,
)


def calculate_stage_duration(stage, ctx):
    """ctx: {'controls', 'modality', 'hasChampion', 'loadRatio'}"""
    controls = ctx['controls']; modality = ctx['modality']

    base = PARAMETERS['stages'][stage]['baseDuration']
    modality_mod = PARAMETERS['modalities'][modality]['durationMultipliers'][stage]
    advisor_mod = PARAMETERS['advisorDurationMod'][stage] if controls['advisor'] else 1.0

    pmu_fraction = controls['pmuAdd'] / MAX_PMU_ADD
    pmu_mod = 1.0 - pmu_fraction * PARAMETERS['pmuMaxDurationReduction'][stage]

    champion_mod = PARAMETERS['championDurationReduction'] if ctx.get('hasChampion') and stage == 4 else 1.0
    capacity_mod = get_capacity_duration_modifier(ctx['loadRatio'])
    risk_mod = PARAMETERS['riskDurationMod'][controls['politicalRisk']][stage]

    duration = base * modality_mod * advisor_mod * pmu_mod * champion_mod * capacity_mod * risk_mod
    return max(1.0, duration)


def get_capacity_duration_modifier(load_ratio):
    th = PARAMETERS['capacityThresholds']; pen = PARAMETERS['capacityPenalties']
    if load_ratio <= th['green']:
        return 1.0
    if load_ratio <= th['yellow']:
        return pen['durationYellow']
    return pen['durationRed']


def calculate_total_duration(ctx):
    return sum(calculate_stage_duration(s, ctx) for s in ACTIVE_STAGES)


def calculate_weighted_average_duration(controls, load_ratio):
    # Non-championed baseline; champions only enter via gates.calculate_championed_pass_rate
    total = 0.0
    for modality, weight in modality_weights(controls):
        ctx = {'controls': controls, 'modality': modality, 'hasChampion': False, 'loadRatio': load_ratio}
        total += weight * calculate_total_duration(ctx)
    return total


def get_stage_duration_breakdown(controls, modality, has_champion, load_ratio):
    ctx = {'controls': controls, 'modality': modality, 'hasChampion': has_champion, 'loadRatio': load_ratio}
    return {
        s: {'base': PARAMETERS['stages'][s]['baseDuration'],
            'modified': round(calculate_stage_duration(s, ctx), 2)}
        for s in ACTIVE_STAGES
    }
