"""
Chad 2030 Pipeline Simulator — Flask API Server
Owns the current control set and its latest result; every control change
re-runs the stateless engine and replaces the stored output.
"""
import logging
import math
import os
import traceback
from flask import Flask, jsonify, request, send_file
from werkzeug.exceptions import HTTPException
from pipeline_sim.controls import DEFAULT_CONTROLS, InvalidControls
from pipeline_sim.simulation import run_simulation
from pipeline_sim.stages import get_stage_duration_breakdown
from pipeline_sim.gates import get_pass_rate_breakdown
from pipeline_sim.capacity import get_capacity_summary, check_parliamentary_constraint
from pipeline_sim.presets import generate_presets
from pipeline_sim.scenarios import ScenarioStore, build_scenario
from pipeline_sim.formatters import format_currency, format_months, format_status_for_screen_reader
from pipeline_sim.export import workbook_bytes

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
app.config['SCENARIO_STORE'] = os.environ.get('SCENARIO_STORE', os.path.join(BASE_DIR, 'data', 'scenarios.json'))

STATE = {
    'controls': dict(DEFAULT_CONTROLS), 'outputs': None,
    'lastRunMs': 0.0, 'error': None,
}


def _store():
    return ScenarioStore(app.config['SCENARIO_STORE'])


def _sanitize_for_json(obj):
    """inf/nan → None, int dict keys → str."""
    if isinstance(obj, float) and (math.isinf(obj) or math.isnan(obj)):
        return None
    if isinstance(obj, dict):
        return {str(k): _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_json(v) for v in obj]
    return obj


def _recompute(controls):
    """Run the engine and swap in the new result only once it is complete."""
    result = run_simulation(controls)
    STATE['controls'] = result['controls']
    STATE['outputs'] = result['outputs']
    STATE['lastRunMs'] = result['executionTimeMs']
    STATE['error'] = None
    return result


def _state_payload():
    return _sanitize_for_json({
        'controls': STATE['controls'], 'outputs': STATE['outputs'],
        'executionTimeMs': round(STATE['lastRunMs'], 3),
    })


def _json_body():
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidControls(['request body must be a JSON object'])
    return body


@app.errorhandler(InvalidControls)
def _invalid_controls(e):
    return jsonify({'error': 'invalid controls', 'details': e.errors}), 400


@app.errorhandler(Exception)
def _unexpected(e):
    if isinstance(e, HTTPException):
        return e
    traceback.print_exc()
    return jsonify({'status': 'error', 'message': str(e)}), 500


@app.before_request
def _ensure_loaded():
    if STATE['outputs'] is None and not STATE['error']:
        try:
            _recompute(STATE['controls'])
            print("[OK] Pipeline simulator engines loaded")
        except Exception as e:
            STATE['error'] = f"{type(e).__name__}: {e}"
            print(f"[!] ENGINE LOAD FAILED: {STATE['error']}")
            traceback.print_exc()


# ══════════════════════════════════════════════════════════════
#  ROUTES
# ══════════════════════════════════════════════════════════════

@app.route('/api/defaults')
def api_defaults():
    return jsonify(DEFAULT_CONTROLS)


@app.route('/api/controls', methods=['GET'])
def api_get_controls():
    return jsonify(STATE['controls'])


@app.route('/api/controls', methods=['POST'])
def api_update_controls():
    """Partial control update + recompute."""
    updates = _json_body()
    merged = dict(STATE['controls'])
    merged.update(updates)
    result = _recompute(merged)
    payload = _state_payload()
    payload['status'] = 'ok'
    payload['adjustments'] = result['outputs']['controlAdjustments']
    return jsonify(payload)


@app.route('/api/reset', methods=['POST'])
def api_reset():
    _recompute(dict(DEFAULT_CONTROLS))
    payload = _state_payload(); payload['status'] = 'ok'
    return jsonify(payload)


@app.route('/api/simulate', methods=['POST'])
def api_simulate():
    """One-shot run; does not touch the stored state."""
    result = run_simulation(_json_body())
    return jsonify(_sanitize_for_json(result))


@app.route('/api/outputs')
def api_outputs():
    if STATE['outputs'] is None:
        return jsonify({'error': 'Not loaded', 'reason': STATE['error']}), 503
    return jsonify(_state_payload())


@app.route('/api/fiscal')
def api_fiscal():
    if STATE['outputs'] is None: return jsonify({'error': 'Not loaded'}), 503
    o = STATE['outputs']
    return jsonify(_sanitize_for_json({
        'fiscalStatus': o['fiscalStatus'],
        'statusText': format_status_for_screen_reader(o['fiscalStatus']),
        'breachYear': o['breachYear'], 'breachReason': o['breachReason'],
        'byYear': o['fiscalByYear'],
    }))


@app.route('/api/pipeline')
def api_pipeline():
    if STATE['outputs'] is None: return jsonify({'error': 'Not loaded'}), 503
    o = STATE['outputs']
    return jsonify(_sanitize_for_json({
        'nFid': o['nFid'], 'nDropped': o['nDropped'],
        'dropsByGate': o['dropsByGate'], 'byYear': o['pipelineByYear'],
        'parliamentary': check_parliamentary_constraint([p['fids'] for p in o['pipelineByYear']]),
    }))


@app.route('/api/capacity')
def api_capacity():
    if STATE['outputs'] is None: return jsonify({'error': 'Not loaded'}), 503
    o = STATE['outputs']
    summary = get_capacity_summary(STATE['controls'])
    summary.update({'capacityStatus': o['capacityStatus'], 'peakLoadRatio': o['peakLoadRatio']})
    return jsonify(_sanitize_for_json(summary))


@app.route('/api/breakdown')
def api_breakdown():
    """Per-stage durations and per-gate pass rates for one modality."""
    modality = request.args.get('modality', 'PPP')
    champion = request.args.get('champion', 'false').lower() in ('1', 'true', 'yes')
    load_ratio = request.args.get('loadRatio', type=float, default=0.0)
    try:
        stages = get_stage_duration_breakdown(STATE['controls'], modality, champion, load_ratio)
        gates = get_pass_rate_breakdown(STATE['controls'], modality, champion, load_ratio)
    except KeyError:
        return jsonify({'error': f"unknown modality '{modality}'"}), 400
    return jsonify(_sanitize_for_json({'modality': modality, 'hasChampion': champion,
                                       'stages': stages, 'gates': gates}))


@app.route('/api/presets')
def api_presets():
    return jsonify(_sanitize_for_json(generate_presets()))


@app.route('/api/scenarios', methods=['GET'])
def api_list_scenarios():
    return jsonify(_sanitize_for_json(_store().load()))


@app.route('/api/scenarios', methods=['POST'])
def api_save_scenario():
    body = _json_body()
    name = str(body.get('name', '')).strip()[:50]
    if not name:
        return jsonify({'error': 'name required'}), 400
    if STATE['outputs'] is None:
        return jsonify({'error': 'Not loaded'}), 503
    scenario = build_scenario(name, STATE['controls'], STATE['outputs'])
    if not _store().save(scenario):
        return jsonify({'error': 'scenario limit reached'}), 409
    return jsonify(_sanitize_for_json({'status': 'ok', 'scenario': scenario})), 201


@app.route('/api/scenarios/<scenario_id>', methods=['DELETE'])
def api_delete_scenario(scenario_id):
    if scenario_id.startswith('preset_'):
        return jsonify({'error': 'presets cannot be deleted'}), 400
    if not _store().delete(scenario_id):
        return jsonify({'error': 'not found'}), 404
    return jsonify({'status': 'ok'})


@app.route('/api/scenarios/<scenario_id>/load', methods=['POST'])
def api_load_scenario(scenario_id):
    scenario = _find_scenario(scenario_id)
    if scenario is None:
        return jsonify({'error': 'not found'}), 404
    _recompute(scenario['controls'])
    payload = _state_payload(); payload['status'] = 'ok'
    return jsonify(payload)


@app.route('/api/compare')
def api_compare():
    rows = []
    for s in generate_presets() + _store().load():
        o = s['outputs']
        rows.append({
            'id': s['id'], 'name': s['name'], 'isPreset': s['isPreset'],
            'nFid': o['nFid'],
            'investment': format_currency(o['investmentTotal']),
            'fiscalStatus': o['fiscalStatus'],
            'cofinancing': format_currency(o['cofinancingTotal']),
            'time': format_months(o['avgTimeToFid']),
        })
    return jsonify(rows)


@app.route('/api/export')
def api_export():
    """Export current result, presets and saved scenarios to Excel."""
    try:
        current = {'name': 'Current', 'controls': STATE['controls'], 'outputs': STATE['outputs']}
        buf = workbook_bytes([current] + generate_presets() + _store().load())
        return send_file(buf, as_attachment=True, download_name='Chad2030_Pipeline_Export.xlsx',
                         mimetype=XLSX_MIMETYPE)
    except Exception as e:
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500


def _find_scenario(scenario_id):
    for p in generate_presets():
        if p['id'] == scenario_id:
            return p
    return _store().get(scenario_id)


if __name__ == '__main__':
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'))
    app.run(debug=False, host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
