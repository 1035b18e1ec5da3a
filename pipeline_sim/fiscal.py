"""
Chad 2030 Pipeline Simulator — Fiscal Engine
Revenue (oil, non-oil, donor), fiscal space under four IMF/CEMAC limits,
co-financing demand, debt ratio and per-year traffic-light status.

Units: all outputs are USD millions. Macro aggregates are held in CFAF
billions and converted at PARAMETERS['fiscal']['cfafPerUsd'].
"""
import logging
from pipeline_sim.parameters import PARAMETERS, SIMULATION_YEARS, STATUS_ORDER

FISCAL = PARAMETERS['fiscal']
BASE_YEAR = SIMULATION_YEARS[0]


def _cfaf_bn_to_usd_m(v):
    return v / FISCAL['cfafPerUsd'] * 1000


# ── Revenue ──

def calculate_oil_production(year):
    production = FISCAL['oilProd2025']
    for y in range(BASE_YEAR, year):
        production *= 1 + FISCAL['oilProdGrowth'].get(y, 0)
    return production


def calculate_oil_revenue(year, oil_price):
    daily = calculate_oil_production(year) * oil_price * FISCAL['govTakeRate']
    return daily * FISCAL['daysPerYear'] / 1_000_000


def calculate_non_oil_gdp(year):
    """CFAF billions."""
    gdp = FISCAL['nonOilGdp2025']
    for y in range(BASE_YEAR, year):
        gdp *= 1 + FISCAL['nonOilGrowth'].get(y, 0.0375)
    return gdp


def calculate_non_oil_revenue(year):
    tax_rate = FISCAL['nonOilTaxRate'].get(year, 0.089)
    return _cfaf_bn_to_usd_m(calculate_non_oil_gdp(year) * tax_rate)


def calculate_donor_grants(year, donor_rate):
    baseline = FISCAL['donorBaseline'].get(year, 0.018)
    return _cfaf_bn_to_usd_m(calculate_non_oil_gdp(year) * baseline * donor_rate)


def resolve_oil_price(scenario):
    if scenario in FISCAL['oilPrices']:
        return FISCAL['oilPrices'][scenario]
    logging.info(f"resolve_oil_price: no scenario for {scenario}, using it as a literal price")
    return scenario


def calculate_annual_revenue(year, controls):
    oil = calculate_oil_revenue(year, resolve_oil_price(controls['oilPrice']))
    non_oil = calculate_non_oil_revenue(year)
    donors = calculate_donor_grants(year, controls['donorRate'])
    return {'total': oil + non_oil + donors, 'oil': oil, 'nonOil': non_oil, 'donors': donors}


# ── Fiscal space ──

def calculate_total_gdp(year):
    # Total GDP tracks the non-oil growth path
    gdp = FISCAL['totalGdp2025']
    for y in range(BASE_YEAR, year):
        gdp *= 1 + FISCAL['nonOilGrowth'].get(y, 0.0375)
    return _cfaf_bn_to_usd_m(gdp)


def calculate_cofinancing_limit(year, controls, revenue=None):
    revenue = revenue or calculate_annual_revenue(year, controls)
    return revenue['total'] * FISCAL['maxCofinSafe']


def calculate_fixed_obligations(year):
    """Wages + interest + transfers, USD M."""
    nog = calculate_non_oil_gdp(year)
    share = FISCAL['wages'].get(year, 0.06) + FISCAL['interest'] + FISCAL['transfers']
    return _cfaf_bn_to_usd_m(share * nog)


def calculate_deficit_limit(year, controls, revenue=None):
    revenue = revenue or calculate_annual_revenue(year, controls)
    fixed = calculate_fixed_obligations(year)
    social_floor = fixed * FISCAL['socialFloor']
    allowance = abs(FISCAL['maxDeficit']) * calculate_total_gdp(year)
    return revenue['total'] + allowance - fixed - social_floor


def calculate_contingent_limit(year):
    gdp = calculate_total_gdp(year)
    return FISCAL['maxContingent'] * gdp - FISCAL['contingent2025'] * gdp


def calculate_debt_headroom(year):
    # Debt stock held at the 2025 share of GDP; new borrowing is not accumulated
    gdp = calculate_total_gdp(year)
    return FISCAL['debtCeiling'] * gdp - FISCAL['debtGdp2025'] * gdp


def calculate_fiscal_constraints(year, controls, revenue=None):
    """All four limits plus the binding (smallest) one."""
    revenue = revenue or calculate_annual_revenue(year, controls)
    limits = {
        'cofinancingLimit': calculate_cofinancing_limit(year, controls, revenue),
        'deficitLimit': calculate_deficit_limit(year, controls, revenue),
        'contingentLimit': calculate_contingent_limit(year),
        'debtHeadroom': calculate_debt_headroom(year),
    }
    binding = min(limits, key=limits.get)
    return {'limits': limits, 'binding': binding, 'fiscalSpace': limits[binding]}


def calculate_fiscal_space(year, controls):
    return calculate_fiscal_constraints(year, controls)['fiscalSpace']


# ── Co-financing ──

def calculate_cofinancing_demand(capex_usd_m, modality):
    return capex_usd_m * PARAMETERS['modalities'][modality]['cofinancingRate']


def calculate_contingent_liability(capex_usd_m, modality):
    return capex_usd_m * PARAMETERS['modalities'][modality]['contingentLiabilityRate']


# ── Status ──

def calculate_debt_ratio(year, new_borrowing=0.0):
    base_debt = FISCAL['debtGdp2025'] * calculate_total_gdp(BASE_YEAR)
    return (base_debt + new_borrowing) / calculate_total_gdp(year)


def get_fiscal_status(cofin_demand, fiscal_space):
    if fiscal_space <= 0:
        return 'RED'
    ratio = cofin_demand / fiscal_space
    th = PARAMETERS['fiscalThresholds']
    if ratio <= th['green']:
        return 'GREEN'
    if ratio <= th['yellow']:
        return 'YELLOW'
    return 'RED'


def get_debt_status(debt_ratio):
    if debt_ratio >= FISCAL['debtCeiling']:
        return 'RED'
    if debt_ratio >= FISCAL['debtWarning']:
        return 'YELLOW'
    return 'GREEN'


def worst_status(statuses):
    worst = 0
    for s in statuses:
        worst = max(worst, STATUS_ORDER.index(s))
    return STATUS_ORDER[worst]


def get_combined_fiscal_status(flow_status, debt_status):
    return worst_status([flow_status, debt_status])


# ── Projection ──

def generate_fiscal_projection(controls, cofin_by_year):
    projection = []
    for year in SIMULATION_YEARS:
        revenue = calculate_annual_revenue(year, controls)
        constraints = calculate_fiscal_constraints(year, controls, revenue)
        fiscal_space = constraints['fiscalSpace']
        cofin = cofin_by_year.get(year, 0)
        debt_ratio = calculate_debt_ratio(year)

        # NOPD: (fixed obligations + co-financing − non-oil revenue) / non-oil GDP
        non_oil_gdp_usd = _cfaf_bn_to_usd_m(calculate_non_oil_gdp(year))
        spending = calculate_fixed_obligations(year) + cofin
        nopd_actual = (spending - revenue['nonOil']) / non_oil_gdp_usd

        status = get_combined_fiscal_status(get_fiscal_status(cofin, fiscal_space),
                                            get_debt_status(debt_ratio))
        projection.append({
            'year': year,
            'revenue': revenue['total'],
            'oilRevenue': revenue['oil'],
            'nonOilRevenue': revenue['nonOil'],
            'donorGrants': revenue['donors'],
            'fiscalSpace': fiscal_space,
            'bindingConstraint': constraints['binding'],
            'cofinancingDemand': cofin,
            'debtRatio': debt_ratio,
            'nopdActual': nopd_actual,
            'nopdTarget': FISCAL['nopdTargets'].get(year, -0.05),
            'fiscalStatus': status,
        })
    return projection


def find_breach_year(projection):
    """First RED year and a readable reason, or (None, None)."""
    for rec in projection:
        if rec['fiscalStatus'] != 'RED':
            continue
        reasons = []
        if rec['cofinancingDemand'] > rec['fiscalSpace']:
            reasons.append('co-financing exceeds fiscal space')
        if rec['debtRatio'] >= FISCAL['debtCeiling']:
            reasons.append('debt ceiling breached')
        reason = '; '.join(reasons) or 'fiscal limit exceeded'
        logging.debug(f"find_breach_year: {rec['year']} ({reason})")
        return rec['year'], reason
    return None, None
