"""
Chad 2030 Pipeline Simulator — Control Inputs
Defaults, boundary checks and normalization for the policy-lever record.
The engine runs normalize_controls() itself, so callers may pass raw
partial updates; out-of-range values are clamped and logged, never rejected.
"""
import logging
import math
from pipeline_sim.parameters import (
    RISK_LEVELS, MAX_PMU_ADD, MAX_CHAMPIONS,
)

DEFAULT_CONTROLS = {
    'advisor': False,
    'advisorMonths': 18,
    'pmuAdd': 0,
    'nChampion': 0,
    'nActive': 50,
    'pctGovLed': 40,
    'pctPPP': 40,
    'pctPrivate': 20,
    'oilPrice': 65,
    'donorRate': 0.7,
    'politicalRisk': 'MED',
}

CONTROL_RANGES = {
    'pmuAdd': (0, MAX_PMU_ADD),
    'nChampion': (0, MAX_CHAMPIONS),
    'donorRate': (0.0, 1.0),
}

NUMERIC_FIELDS = ('advisorMonths', 'pmuAdd', 'nChampion', 'nActive',
                  'pctGovLed', 'pctPPP', 'pctPrivate', 'oilPrice', 'donorRate')


class InvalidControls(ValueError):
    """Raised for control records that cannot be interpreted at all."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))


def check_controls(controls):
    """Fail fast on programmer errors: unknown keys, wrong value types."""
    errors = []
    for key, value in controls.items():
        if key not in DEFAULT_CONTROLS:
            errors.append(f"unknown control '{key}'")
        elif key in NUMERIC_FIELDS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"'{key}' must be numeric, got {type(value).__name__}")
            elif not math.isfinite(value):
                errors.append(f"'{key}' must be finite, got {value}")
        elif key == 'advisor' and not isinstance(value, bool):
            errors.append(f"'advisor' must be a boolean, got {type(value).__name__}")
        elif key == 'politicalRisk' and not isinstance(value, str):
            errors.append(f"'politicalRisk' must be a string, got {type(value).__name__}")
    if errors:
        raise InvalidControls(errors)


def normalize_modality_percentages(controls):
    """Rescale the three modality shares so they sum to 100.
    GOV_LED and PPP are rounded; FULLY_PRIVATE takes the remainder.
    An all-zero split is returned unchanged.
    """
    out = dict(controls)
    gov = out.get('pctGovLed', 0); ppp = out.get('pctPPP', 0); priv = out.get('pctPrivate', 0)
    total = gov + ppp + priv
    if abs(total - 100) < 0.01 or total <= 0:
        return out
    out['pctGovLed'] = _round_half_up(gov / total * 100)
    out['pctPPP'] = _round_half_up(ppp / total * 100)
    out['pctPrivate'] = 100 - out['pctGovLed'] - out['pctPPP']
    if out['pctPrivate'] < 0:
        # both rounded up; take the excess from the larger share
        larger = 'pctGovLed' if out['pctGovLed'] >= out['pctPPP'] else 'pctPPP'
        out[larger] += out['pctPrivate']
        out['pctPrivate'] = 0
    return out


def normalize_controls(controls=None):
    """Merge onto defaults, check types, clamp ranges, rebalance modality split.

    Returns (normalized_controls, adjustments) where adjustments is a list of
    human-readable messages describing every value that was changed.
    """
    raw = dict(controls or {})
    check_controls(raw)
    c = dict(DEFAULT_CONTROLS)
    c.update(raw)
    adjustments = []

    for key in ('pctGovLed', 'pctPPP', 'pctPrivate'):
        if c[key] < 0:
            adjustments.append(f"{key} {c[key]} clamped to 0")
            c[key] = 0
    before = (c['pctGovLed'], c['pctPPP'], c['pctPrivate'])
    c = normalize_modality_percentages(c)
    after = (c['pctGovLed'], c['pctPPP'], c['pctPrivate'])
    if before != after:
        adjustments.append(f"modality split {before} rescaled to {after}")

    _clamp_field(c, 'pmuAdd', *CONTROL_RANGES['pmuAdd'], adjustments)
    if c['nActive'] < 0:
        adjustments.append(f"nActive {c['nActive']} clamped to 0")
        c['nActive'] = 0
    lo, hi = CONTROL_RANGES['nChampion']
    _clamp_field(c, 'nChampion', lo, min(hi, c['nActive']), adjustments)
    _clamp_field(c, 'donorRate', *CONTROL_RANGES['donorRate'], adjustments)

    if c['politicalRisk'] not in RISK_LEVELS:
        adjustments.append(f"politicalRisk '{c['politicalRisk']}' replaced by 'MED'")
        c['politicalRisk'] = 'MED'

    for msg in adjustments:
        logging.warning(f"normalize_controls: {msg}")
    return c, adjustments


def _clamp_field(c, key, lo, hi, adjustments):
    v = c[key]
    nv = max(lo, min(hi, v))
    if nv != v:
        adjustments.append(f"{key} {v} clamped to {nv}")
        c[key] = nv


def _round_half_up(x):
    return math.floor(x + 0.5)
