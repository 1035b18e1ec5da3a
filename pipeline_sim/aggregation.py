"""
Chad 2030 Pipeline Simulator — Aggregation Engine
Turns scalar rates and durations into cohort counts and money flows:
FIDs by year and modality, investment and co-financing, drops by gate,
preparation cost and the annual pipeline table.

Rounding is half-up and applied per step (per gate, per year). The FID
year distribution is exact (last year absorbs the residual); drop totals
may drift from nActive − survivors by a unit or two.
"""
import math
from pipeline_sim.parameters import (
    PARAMETERS, SIMULATION_YEARS, ACTIVE_GATES, ACTIVE_STAGES, MODALITIES,
)
from pipeline_sim.fiscal import calculate_cofinancing_demand, calculate_contingent_liability


def round_half_up(x):
    return math.floor(x + 0.5)


# ── FIDs ──

def distribute_fids_across_years(total_fids, avg_duration_months, start_year=None):
    """Ramp-up distribution: nothing before ceil(start + duration/12), then weights 1,2,3,..."""
    start_year = start_year or SIMULATION_YEARS[0]
    result = {y: 0 for y in SIMULATION_YEARS}

    first_fid_year = math.ceil(start_year + avg_duration_months / 12)
    years = [y for y in SIMULATION_YEARS if y >= first_fid_year]
    if not years:
        result[SIMULATION_YEARS[-1]] = total_fids
        return result

    weights = list(range(1, len(years) + 1))
    total_weight = sum(weights)
    allocated = 0
    for y, w in zip(years, weights):
        result[y] = round_half_up(w / total_weight * total_fids)
        allocated += result[y]
    result[years[-1]] += total_fids - allocated
    return result


def distribute_fids_by_modality(total_fids, controls):
    gov = round_half_up(total_fids * controls['pctGovLed'] / 100)
    ppp = round_half_up(total_fids * controls['pctPPP'] / 100)
    return {'GOV_LED': gov, 'PPP': ppp, 'FULLY_PRIVATE': max(0, total_fids - gov - ppp)}


# ── Investment ──

def calculate_investment_mobilized(fids, controls):
    capex = PARAMETERS['init']['capexAvg']
    total = fids * capex
    by_modality = {m: n * capex for m, n in distribute_fids_by_modality(fids, controls).items()}

    cofin = 0.0; contingent = 0.0
    for m in MODALITIES:
        cofin += calculate_cofinancing_demand(by_modality[m], m)
        contingent += calculate_contingent_liability(by_modality[m], m)

    return {
        'total': total,
        'private': total - cofin,
        'govCofinancing': cofin,
        'byModality': by_modality,
        'contingentLiabilities': contingent,
    }


def distribute_cofinancing_by_year(fids_by_year, controls):
    result = {}
    for y in SIMULATION_YEARS:
        n = fids_by_year.get(y, 0)
        result[y] = calculate_investment_mobilized(n, controls)['govCofinancing'] if n > 0 else 0.0
    return result


# ── Drops ──

def calculate_drops_by_gate(n_active, gate_pass_rates):
    """Sequential attrition; each gate's drop count is rounded independently."""
    by_gate = {}
    surviving = n_active
    for g in ACTIVE_GATES:
        passing = surviving * gate_pass_rates[g]
        by_gate[g] = round_half_up(surviving - passing)
        surviving = passing
    return {'total': sum(by_gate.values()), 'byGate': by_gate, 'survivors': surviving}


def calculate_average_time_to_fid(stage_durations):
    return sum(stage_durations[s] for s in ACTIVE_STAGES)


# ── Preparation cost ──

def calculate_preparation_cost(fids, drops, controls):
    """USD M. FID projects pay every stage; dropped projects pay a flat
    estimate of dropAvgStagesCompleted × dropStageCostEstimate."""
    by_modality = {}
    for m, n in distribute_fids_by_modality(fids, controls).items():
        per_project = sum(PARAMETERS['stageCosts'][m][s] for s in ACTIVE_STAGES)
        by_modality[m] = n * per_project / 1000

    dropped_cost = (drops['total'] * PARAMETERS['dropAvgStagesCompleted']
                    * PARAMETERS['dropStageCostEstimate'] / 1000)
    return {
        'total': sum(by_modality.values()) + dropped_cost,
        'byModality': by_modality,
        'droppedCost': dropped_cost,
        'fidProjects': fids,
        'droppedProjects': drops['total'],
    }


# ── Annual pipeline table ──

def generate_pipeline_data(total_fids, total_drops, n_active, avg_duration, controls):
    fids_by_year = distribute_fids_across_years(total_fids, avg_duration)
    drop_rate = total_drops / total_fids if total_fids else 0.0

    rows = []
    cum_fids = 0; cum_drops = 0
    for y in SIMULATION_YEARS:
        fids = fids_by_year[y]
        cum_fids += fids
        dropped = round_half_up(fids * drop_rate)
        cum_drops += dropped
        inv = calculate_investment_mobilized(fids, controls)
        rows.append({
            'year': y,
            'fids': fids,
            'cumulativeFids': cum_fids,
            'dropped': dropped,
            'inFlight': max(0, n_active - cum_fids - cum_drops),
            'investmentMobilized': inv['total'],
            'privateCapital': inv['private'],
            'govCofinancing': inv['govCofinancing'],
        })
    return rows
