"""
Chad 2030 Pipeline Simulator — Simulation Orchestrator
Single entry point: run_simulation(controls) → {outputs, controls, projectStates, executionTimeMs}
where controls is the normalized record the run actually used.

Cohort-based deterministic mode only. Each call is a pure function of the
control record and PARAMETERS; nothing is cached between calls.

Pipeline:
  controls → capacity → (durations, pass rates) → FIDs → years/modality
  → investment & co-financing → fiscal projection → capacity status
  → preparation cost → pipeline table → bounds validation
"""
import logging
import time
from pipeline_sim.parameters import PARAMETERS
from pipeline_sim.controls import normalize_controls
from pipeline_sim.stages import calculate_weighted_average_duration
from pipeline_sim.gates import (
    calculate_weighted_cumulative_pass_rate, calculate_championed_pass_rate,
    calculate_average_gate_pass_rates,
)
from pipeline_sim.capacity import (
    calculate_total_capacity, get_capacity_status, calculate_peak_load_ratio,
    estimate_projects_by_stage,
)
from pipeline_sim.fiscal import generate_fiscal_projection, find_breach_year, worst_status
from pipeline_sim.aggregation import (
    round_half_up, distribute_fids_across_years, calculate_investment_mobilized,
    distribute_cofinancing_by_year, calculate_drops_by_gate,
    calculate_preparation_cost, generate_pipeline_data,
)

MAX_STEADY_STATE_LOAD = 1.2


def run_simulation(controls=None):
    started = time.perf_counter()
    controls, adjustments = normalize_controls(controls)

    # 1-2. Capacity and capped steady-state load
    total_capacity = calculate_total_capacity(controls)
    if total_capacity > 0:
        load_ratio = min(controls['nActive'] / total_capacity, MAX_STEADY_STATE_LOAD)
    else:
        load_ratio = MAX_STEADY_STATE_LOAD

    # 3-4. Portfolio duration and survival
    avg_duration = calculate_weighted_average_duration(controls, load_ratio)
    normal_rate = calculate_weighted_cumulative_pass_rate(controls, load_ratio)

    # 5-6. Championed cohort (PPP-rated) + the rest
    champion_rate = calculate_championed_pass_rate(controls, load_ratio)
    n_champion = controls['nChampion']
    total_fids = round_half_up(n_champion * champion_rate
                               + (controls['nActive'] - n_champion) * normal_rate)

    # 7. Timing, money, attrition, fiscal
    fids_by_year = distribute_fids_across_years(total_fids, avg_duration)
    investment = calculate_investment_mobilized(total_fids, controls)
    drops = calculate_drops_by_gate(controls['nActive'],
                                    calculate_average_gate_pass_rates(controls, load_ratio))
    cofin_by_year = distribute_cofinancing_by_year(fids_by_year, controls)
    fiscal_projection = generate_fiscal_projection(controls, cofin_by_year)

    # 8. Overall status and first breach
    fiscal_status = determine_overall_fiscal_status(fiscal_projection)
    breach_year, breach_reason = find_breach_year(fiscal_projection)

    # 9. Capacity status from the static stage apportionment
    projects_by_stage = estimate_projects_by_stage(controls['nActive'], avg_duration)
    peak_load = calculate_peak_load_ratio(projects_by_stage, total_capacity)
    capacity_status = get_capacity_status(peak_load)

    # 10. Cost and annual table
    prep_cost = calculate_preparation_cost(total_fids, drops, controls)
    pipeline_by_year = generate_pipeline_data(total_fids, drops['total'], controls['nActive'],
                                              avg_duration, controls)

    # 11. Bounds
    is_valid, warning = validate_bounds(total_fids, avg_duration, controls)
    if warning:
        logging.info(f"run_simulation: {warning}")

    outputs = {
        'nFid': total_fids,
        'investmentTotal': investment['total'],
        'investmentPrivate': investment['private'],
        'cofinancingTotal': investment['govCofinancing'],
        'contingentLiabilities': investment['contingentLiabilities'],
        'fiscalStatus': fiscal_status,
        'nDropped': drops['total'],
        'avgTimeToFid': avg_duration,
        'prepCost': prep_cost['total'],
        'fiscalByYear': fiscal_projection,
        'pipelineByYear': pipeline_by_year,
        'dropsByGate': drops['byGate'],
        'investmentByModality': investment['byModality'],
        'totalCapacity': total_capacity,
        'capacityStatus': capacity_status,
        'peakLoadRatio': peak_load,
        'breachYear': breach_year,
        'breachReason': breach_reason,
        'isWithinBounds': is_valid,
        'boundsWarning': warning,
        'controlAdjustments': adjustments,
    }
    return {
        'outputs': outputs,
        'controls': controls,
        'projectStates': [],   # per-project state only exists in stochastic mode
        'executionTimeMs': (time.perf_counter() - started) * 1000,
    }


def determine_overall_fiscal_status(fiscal_projection):
    return worst_status(rec['fiscalStatus'] for rec in fiscal_projection)


def classify_scenario(controls):
    """Which documented archetype a control set belongs to, or None."""
    advisor = controls['advisor']; pmu = controls['pmuAdd']
    if not advisor and pmu == 0:
        return 'baseline'
    if advisor and pmu == 0:
        return 'advisor'
    if advisor and pmu >= 10 and controls['nChampion'] >= 10:
        return 'optimized'
    if advisor and pmu > 0:
        return 'advisorPmu'
    return None


def validate_bounds(fids, avg_time, controls):
    """Compare results with the documented ranges. Returns (is_valid, warning)."""
    b = PARAMETERS['bounds']
    warnings = []
    archetype = classify_scenario(controls)

    fid_ranges = {
        'baseline': ('Baseline', b['fidBaselineMin'], b['fidBaselineMax']),
        'advisor': ('Advisor-only', b['fidAdvMin'], b['fidAdvMax']),
        'advisorPmu': ('Advisor+PMU', b['fidAdvPmuMin'], b['fidAdvPmuMax']),
        'optimized': ('Optimized', b['fidOptMin'], b['fidOptMax']),
    }
    if archetype in fid_ranges:
        label, lo, hi = fid_ranges[archetype]
        if fids < lo or fids > hi:
            warnings.append(f"{label} FIDs ({fids}) outside expected range {lo}-{hi}")

    time_ranges = {
        'baseline': ('Baseline', b['timeBaselineMin'], b['timeBaselineMax']),
        'optimized': ('Optimized', b['timeOptMin'], b['timeOptMax']),
    }
    if archetype in time_ranges:
        label, lo, hi = time_ranges[archetype]
        if avg_time < lo or avg_time > hi:
            warnings.append(f"{label} time ({avg_time:.1f} mo) outside expected range {lo}-{hi}")

    investment = fids * PARAMETERS['init']['capexAvg']
    if investment > b['invMax']:
        warnings.append(f"Investment (${investment:.0f}M) exceeds portfolio cap (${b['invMax']}M)")

    return not warnings, ('; '.join(warnings) if warnings else None)
