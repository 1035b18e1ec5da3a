"""
Chad 2030 Pipeline Simulator — Parameter Table
Single source of truth for every coefficient used by the engines.
Keys: stage (2-6), gate (2-6), modality, risk level, calendar year (2025-2030).
Read-only at runtime.
"""

PARAMETERS = {
    # ── Initial conditions ──
    'init': {
        'nProjects': 268,       # Chad Connection 2030 portfolio
        'capexTotal': 20500,    # USD M
        'capexAvg': 76,         # USD M
        'capexMin': 20,
        'capexMax': 150,
        'nTier1': 40, 'nTier2': 60, 'nTier3': 168,
        'startYear': 2025,
        'endYear': 2030,
        'durationMonths': 72,
    },

    # ── Stage durations (months) ──
    'stages': {
        2: {'baseDuration': 4.5, 'stdDev': 1.5},    # Partnership Structuring
        3: {'baseDuration': 6.5, 'stdDev': 2.5},    # Pre-Feasibility
        4: {'baseDuration': 12.0, 'stdDev': 3.0},   # Feasibility
        5: {'baseDuration': 8.0, 'stdDev': 2.0},    # Parliamentary
        6: {'baseDuration': 2.0, 'stdDev': 1.0},    # Financial Close Prep
    },

    # ── Gate pass rates ──
    'gates': {
        2: {'baseRate': 0.75, 'floor': 0.50, 'ceiling': 0.95},   # Partnership Agreement
        3: {'baseRate': 0.70, 'floor': 0.45, 'ceiling': 0.92},   # Feasibility Authorization
        4: {'baseRate': 0.75, 'floor': 0.50, 'ceiling': 0.95},   # Cabinet Approval
        5: {'baseRate': 0.80, 'floor': 0.55, 'ceiling': 0.95},   # Parliamentary Ratification
        6: {'baseRate': 0.92, 'floor': 0.75, 'ceiling': 0.98},   # Financial Close
    },

    # ── Modality modifiers ──
    'modalities': {
        'GOV_LED': {
            'durationMultipliers': {2: 1.1, 3: 1.23, 4: 1.375, 5: 1.0625, 6: 1.25},
            'passRateAdjustments': {2: -0.03, 3: -0.05, 4: -0.05, 5: -0.05, 6: -0.04},
            'cofinancingRate': 1.0,
            'contingentLiabilityRate': 0.0,
        },
        'PPP': {
            'durationMultipliers': {2: 1.0, 3: 1.0, 4: 1.0, 5: 1.0, 6: 1.0},
            'passRateAdjustments': {2: 0.03, 3: 0.05, 4: 0.05, 5: 0.05, 6: 0.01},
            'cofinancingRate': 0.3,
            'contingentLiabilityRate': 0.125,
        },
        'FULLY_PRIVATE': {
            'durationMultipliers': {2: 0.95, 3: 0.95, 4: 0.85, 5: 0.95, 6: 0.9},
            'passRateAdjustments': {2: 0.0, 3: 0.0, 4: 0.03, 5: 0.03, 6: 0.01},
            'cofinancingRate': 0.0,
            'contingentLiabilityRate': 0.05,   # permits, land
        },
    },

    # ── Interventions ──
    'advisorDurationMod': {2: 0.667, 3: 0.692, 4: 0.75, 5: 0.813, 6: 0.75},
    'advisorLiftMod': {2: 0.10, 3: 0.10, 4: 0.10, 5: 0.08, 6: 0.03},
    'pmuMaxDurationReduction': {2: 0.10, 3: 0.12, 4: 0.15, 5: 0.10, 6: 0.08},   # at 15 FTE
    'pmuMaxLiftMod': {2: 0.04, 3: 0.06, 4: 0.08, 5: 0.06, 6: 0.02},
    'championDurationReduction': 0.7,   # stage 4 multiplier
    'championLift': 0.10,               # gate 4, additive

    # ── Political risk ──
    'riskDurationMod': {
        'LOW':  {2: 1.0, 3: 1.0, 4: 1.0, 5: 1.0, 6: 1.0},
        'MED':  {2: 1.05, 3: 1.05, 4: 1.10, 5: 1.05, 6: 1.05},
        'HIGH': {2: 1.15, 3: 1.15, 4: 1.35, 5: 1.15, 6: 1.15},
    },
    'riskPassPenalty': {
        'LOW':  {2: 0.0, 3: 0.0, 4: 0.0, 5: 0.0, 6: 0.0},
        'MED':  {2: -0.02, 3: -0.02, 4: -0.03, 5: -0.02, 6: -0.02},
        'HIGH': {2: -0.05, 3: -0.05, 4: -0.08, 5: -0.05, 6: -0.05},
    },

    # ── Capacity ──
    'pmuBase': 10,            # FTE
    'projectsPerFte': 2.5,
    'stage4Max': 13,          # cabinet / advisor review bandwidth
    'stage5MaxAnnual': 12,    # parliamentary calendar
    'capacityThresholds': {'green': 0.8, 'yellow': 1.0, 'red': 1.0},
    'capacityPenalties': {
        'durationYellow': 1.10, 'durationRed': 1.25,
        'passYellow': -0.02, 'passRed': -0.05,
    },

    # ── Fiscal ──
    'fiscal': {
        'oilProd2025': 136000,   # bbl/day
        'oilProdGrowth': {2025: -0.007, 2026: 0.12, 2027: 0.12, 2028: 0.12, 2029: 0.12, 2030: 0.12},
        'govTakeRate': 0.55,
        'daysPerYear': 365,
        'oilPrices': {50: 50, 55: 55, 65: 65, 67: 66.94, 75: 75},   # 67 = IMF WEO Apr-2025
        'nonOilGdp2025': 10748,  # CFAF bn
        'nonOilGrowth': {2025: 0.042, 2026: 0.035, 2027: 0.0375, 2028: 0.0375, 2029: 0.0375, 2030: 0.0375},
        'nonOilTaxRate': {2025: 0.089, 2026: 0.095, 2027: 0.10, 2028: 0.103, 2029: 0.107, 2030: 0.11},
        'totalGdp2025': 12250,   # CFAF bn
        'cfafPerUsd': 581,
        # IMF ECF binding constraints
        'maxCofinSafe': 0.35,
        'maxCofinBreach': 0.45,
        'maxDeficit': -0.015,    # CEMAC
        'maxContingent': 0.012,
        'debtCeiling': 0.33,
        'debtWarning': 0.30,
        'nopdTargets': {2025: -0.068, 2026: -0.062, 2027: -0.057, 2028: -0.054, 2029: -0.052, 2030: -0.045},
        'donorBaseline': {2025: 0.028, 2026: 0.023, 2027: 0.018, 2028: 0.018, 2029: 0.018, 2030: 0.018},
        # Fixed obligations, share of non-oil GDP
        'wages': {2025: 0.065, 2026: 0.063, 2027: 0.062, 2028: 0.061, 2029: 0.060, 2030: 0.060},
        'interest': 0.015,
        'transfers': 0.039,
        'socialFloor': 0.30,
        'contingent2025': 0.006,
        'debtGdp2025': 0.28,
    },

    # ── Stage costs (USD thousands) ──
    'stageCosts': {
        'GOV_LED':       {2: 15, 3: 100, 4: 900, 5: 35, 6: 12},   # 1,062
        'PPP':           {2: 15, 3: 60, 4: 500, 5: 35, 6: 12},    # 622
        'FULLY_PRIVATE': {2: 15, 3: 50, 4: 490, 5: 35, 6: 12},    # 602
    },
    'dropStageCostEstimate': 100,   # USD k per stage for dropped projects
    'dropAvgStagesCompleted': 2.5,

    # ── Expected outcome bounds ──
    'bounds': {
        'fidBaselineMin': 85, 'fidBaselineMax': 95,
        'fidAdvMin': 130, 'fidAdvMax': 140,
        'fidAdvPmuMin': 140, 'fidAdvPmuMax': 155,
        'fidOptMin': 160, 'fidOptMax': 180,
        'timeBaselineMin': 28, 'timeBaselineMax': 40,
        'timeOptMin': 18, 'timeOptMax': 28,
        'invMax': 20500,
    },

    'fiscalThresholds': {'green': 0.8, 'yellow': 1.0, 'red': 1.0},
}

MODALITIES = ['GOV_LED', 'PPP', 'FULLY_PRIVATE']
RISK_LEVELS = ['LOW', 'MED', 'HIGH']
STATUS_ORDER = ['GREEN', 'YELLOW', 'RED']
SIMULATION_YEARS = [2025, 2026, 2027, 2028, 2029, 2030]
ACTIVE_STAGES = [2, 3, 4, 5, 6]
ACTIVE_GATES = [2, 3, 4, 5, 6]

MAX_PMU_ADD = 15
MAX_CHAMPIONS = 20
ADVISOR_FTE_EQUIV = 5
ADVISOR_COST = 2.75          # USD M
PMU_COST_PER_FTE = 33.33     # USD k per FTE-year

# Share-of-portfolio key for each modality in the control record
MODALITY_SHARE_KEYS = {'GOV_LED': 'pctGovLed', 'PPP': 'pctPPP', 'FULLY_PRIVATE': 'pctPrivate'}

TOTAL_BASELINE_DURATION = sum(PARAMETERS['stages'][s]['baseDuration'] for s in ACTIVE_STAGES)

CUMULATIVE_BASELINE_PASS_RATE = 1.0
for _g in ACTIVE_GATES:
    CUMULATIVE_BASELINE_PASS_RATE *= PARAMETERS['gates'][_g]['baseRate']
del _g

BASELINE_CAPACITY = PARAMETERS['pmuBase'] * PARAMETERS['projectsPerFte']


def modality_weights(controls):
    """(modality, share 0-1) pairs in canonical order."""
    return [(m, controls[MODALITY_SHARE_KEYS[m]] / 100) for m in MODALITIES]
