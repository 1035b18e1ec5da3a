"""
Chad 2030 Pipeline Simulator — Gate Pass-Rate Engine

  P_PASS[g] = clamp(BASE[g] + MODALITY + ADVISOR + PMU + CHAMPION
                    + CAPACITY_PENALTY + RISK_PENALTY, FLOOR[g], CEILING[g])

Gates are treated as independent: cumulative survival is the product of
the per-gate probabilities.
"""
from pipeline_sim.parameters import (
    PARAMETERS, ACTIVE_GATES, MAX_PMU_ADD, modality_weights,
)


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def calculate_gate_pass_rate(gate, ctx):
    controls = ctx['controls']; modality = ctx['modality']
    cfg = PARAMETERS['gates'][gate]

    rate = cfg['baseRate']
    rate += PARAMETERS['modalities'][modality]['passRateAdjustments'][gate]
    if controls['advisor']:
        rate += PARAMETERS['advisorLiftMod'][gate]
    rate += (controls['pmuAdd'] / MAX_PMU_ADD) * PARAMETERS['pmuMaxLiftMod'][gate]
    if ctx.get('hasChampion') and gate == 4:
        rate += PARAMETERS['championLift']
    rate += get_capacity_pass_penalty(ctx['loadRatio'])
    rate += PARAMETERS['riskPassPenalty'][controls['politicalRisk']][gate]

    return clamp(rate, cfg['floor'], cfg['ceiling'])


def get_capacity_pass_penalty(load_ratio):
    th = PARAMETERS['capacityThresholds']; pen = PARAMETERS['capacityPenalties']
    if load_ratio <= th['green']:
        return 0.0
    if load_ratio <= th['yellow']:
        return pen['passYellow']
    return pen['passRed']


def calculate_cumulative_pass_rate(ctx):
    cumulative = 1.0
    for g in ACTIVE_GATES:
        cumulative *= calculate_gate_pass_rate(g, ctx)
    return cumulative


def calculate_weighted_cumulative_pass_rate(controls, load_ratio):
    total = 0.0
    for modality, weight in modality_weights(controls):
        ctx = {'controls': controls, 'modality': modality, 'hasChampion': False, 'loadRatio': load_ratio}
        total += weight * calculate_cumulative_pass_rate(ctx)
    return total


def calculate_championed_pass_rate(controls, load_ratio):
    """Cumulative rate for the championed cohort.
    Champions are always rated as PPP-structured, whatever the modality split.
    """
    ctx = {'controls': controls, 'modality': 'PPP', 'hasChampion': True, 'loadRatio': load_ratio}
    return calculate_cumulative_pass_rate(ctx)


def calculate_average_gate_pass_rates(controls, load_ratio):
    """Modality-weighted pass rate at each gate (non-championed)."""
    weights = modality_weights(controls)
    result = {}
    for g in ACTIVE_GATES:
        result[g] = sum(
            w * calculate_gate_pass_rate(g, {'controls': controls, 'modality': m,
                                             'hasChampion': False, 'loadRatio': load_ratio})
            for m, w in weights
        )
    return result


def get_pass_rate_breakdown(controls, modality, has_champion, load_ratio):
    ctx = {'controls': controls, 'modality': modality, 'hasChampion': has_champion, 'loadRatio': load_ratio}
    return {
        g: {'base': PARAMETERS['gates'][g]['baseRate'],
            'modified': round(calculate_gate_pass_rate(g, ctx), 4)}
        for g in ACTIVE_GATES
    }


def calculate_expected_pass_count(n_projects, gate, ctx):
    return n_projects * calculate_gate_pass_rate(gate, ctx)


def calculate_expected_survivors(n_projects, ctx):
    return n_projects * calculate_cumulative_pass_rate(ctx)
