"""
Chad 2030 Pipeline Simulator — Capacity Engine
PMU + advisor processing capacity, per-stage load ratios and status.

Stage populations are a static estimate, not a queueing simulation: each
stage holds nActive × baseDuration[s] / total_duration projects. With the
modified portfolio duration as the divisor the counts sum to less than nActive.
"""
import math
from pipeline_sim.parameters import (
    PARAMETERS, ACTIVE_STAGES, ADVISOR_FTE_EQUIV, ADVISOR_COST, PMU_COST_PER_FTE,
    BASELINE_CAPACITY, SIMULATION_YEARS,
)


def calculate_total_capacity(controls):
    advisor_fte = ADVISOR_FTE_EQUIV if controls['advisor'] else 0
    return (PARAMETERS['pmuBase'] + controls['pmuAdd'] + advisor_fte) * PARAMETERS['projectsPerFte']


def get_effective_capacity(stage, total_capacity):
    if stage == 4:
        return min(total_capacity, PARAMETERS['stage4Max'])
    return total_capacity


def calculate_load_ratio(projects_in_stage, stage, total_capacity):
    effective = get_effective_capacity(stage, total_capacity)
    if effective <= 0:
        return math.inf
    return projects_in_stage / effective


def get_capacity_status(load_ratio):
    th = PARAMETERS['capacityThresholds']
    if load_ratio <= th['green']:
        return 'GREEN'
    if load_ratio <= th['yellow']:
        return 'YELLOW'
    return 'RED'


def estimate_projects_by_stage(n_active, total_duration):
    """total_duration is the modified portfolio duration, not the 33-month baseline."""
    if total_duration <= 0:
        return {s: 0 for s in ACTIVE_STAGES}
    return {
        s: math.floor(PARAMETERS['stages'][s]['baseDuration'] / total_duration * n_active + 0.5)
        for s in ACTIVE_STAGES
    }


def calculate_peak_load_ratio(projects_by_stage, total_capacity):
    peak = 0.0
    for s in ACTIVE_STAGES:
        peak = max(peak, calculate_load_ratio(projects_by_stage.get(s, 0), s, total_capacity))
    return peak


def estimate_steady_state_load(active_projects, duration_by_stage, total_duration):
    """Little's law: L = λW with λ = active projects / total pipeline months."""
    if total_duration <= 0:
        return {s: 0.0 for s in ACTIVE_STAGES}
    arrival_rate = active_projects / total_duration
    return {s: arrival_rate * duration_by_stage[s] for s in ACTIVE_STAGES}


def check_parliamentary_constraint(fids_per_year):
    """Years whose FID count exceeds the parliamentary ratification calendar."""
    cap = PARAMETERS['stage5MaxAnnual']
    constrained = [SIMULATION_YEARS[0] + i for i, f in enumerate(fids_per_year) if f > cap]
    return {'isBinding': bool(constrained), 'constrainedYears': constrained}


def calculate_queue_delay(queue_position, stage, avg_stage_duration, total_capacity):
    effective = get_effective_capacity(stage, total_capacity)
    if effective <= 0 or avg_stage_duration <= 0:
        return math.inf
    throughput = effective / avg_stage_duration
    return queue_position / throughput


def get_capacity_summary(controls):
    total = calculate_total_capacity(controls)
    ppf = PARAMETERS['projectsPerFte']
    years = len(SIMULATION_YEARS)
    advisor_cost = ADVISOR_COST if controls['advisor'] else 0.0
    pmu_cost = controls['pmuAdd'] * PMU_COST_PER_FTE * years / 1000   # USD k → M
    return {
        'baselineCapacity': BASELINE_CAPACITY,
        'totalCapacity': total,
        'additionalFromPmu': controls['pmuAdd'] * ppf,
        'additionalFromAdvisor': ADVISOR_FTE_EQUIV * ppf if controls['advisor'] else 0,
        'stage4Limit': PARAMETERS['stage4Max'],
        'stage5AnnualLimit': PARAMETERS['stage5MaxAnnual'],
        'advisorCost': advisor_cost,
        'pmuCost': round(pmu_cost, 3),
        'interventionCost': round(advisor_cost + pmu_cost, 3),
    }
