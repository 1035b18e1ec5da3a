import logging


def test_defaults(client):
    assert client.get('/api/defaults').get_json()['nActive'] == 50


def test_outputs_after_startup(client):
    body = client.get('/api/outputs').get_json()
    assert body['outputs']['nFid'] == 9
    assert body['controls']['advisor'] is False
    assert set(body['outputs']['dropsByGate']) == {'2', '3', '4', '5', '6'}


def test_update_controls_recomputes(client):
    base = client.get('/api/outputs').get_json()['outputs']
    res = client.post('/api/controls', json={'advisor': True})
    assert res.status_code == 200
    body = res.get_json()
    assert body['controls']['advisor'] is True
    assert body['outputs']['totalCapacity'] == 37.5
    assert body['outputs']['avgTimeToFid'] < base['avgTimeToFid']
    assert client.get('/api/controls').get_json()['advisor'] is True


def test_update_reports_clamps(client):
    body = client.post('/api/controls', json={'pmuAdd': 99}).get_json()
    assert body['controls']['pmuAdd'] == 15
    assert body['adjustments'] == ['pmuAdd 99 clamped to 15']


def test_invalid_controls_rejected_and_state_kept(client):
    res = client.post('/api/controls', json={'budget': 1})
    assert res.status_code == 400
    assert res.get_json()['details'] == ["unknown control 'budget'"]
    assert 'budget' not in client.get('/api/controls').get_json()


def test_reset(client):
    client.post('/api/controls', json={'advisor': True, 'pmuAdd': 10})
    body = client.post('/api/reset').get_json()
    assert body['controls']['advisor'] is False
    assert body['controls']['pmuAdd'] == 0


def test_simulate_is_stateless(client):
    body = client.post('/api/simulate', json={'advisor': True}).get_json()
    assert body['projectStates'] == []
    assert body['outputs']['totalCapacity'] == 37.5
    assert client.get('/api/controls').get_json()['advisor'] is False


def test_fiscal_view(client):
    body = client.get('/api/fiscal').get_json()
    assert body['fiscalStatus'] == 'RED'
    assert body['breachYear'] == 2030
    assert body['statusText'] == 'red, IMF limits exceeded'
    assert len(body['byYear']) == 6


def test_pipeline_and_capacity_views(client):
    pipeline = client.get('/api/pipeline').get_json()
    assert sum(r['fids'] for r in pipeline['byYear']) == pipeline['nFid']
    assert pipeline['parliamentary']['isBinding'] is False
    capacity = client.get('/api/capacity').get_json()
    assert capacity['totalCapacity'] == 25


def test_breakdown(client):
    body = client.get('/api/breakdown?modality=GOV_LED&champion=true').get_json()
    assert body['hasChampion'] is True
    assert set(body['stages']) == {'2', '3', '4', '5', '6'}
    assert client.get('/api/breakdown?modality=XYZ').status_code == 400


def test_presets(client):
    presets = client.get('/api/presets').get_json()
    assert len(presets) == 5
    assert all(p['isPreset'] for p in presets)


def test_scenario_lifecycle(client):
    res = client.post('/api/scenarios', json={'name': 'Mine'})
    assert res.status_code == 201
    sid = res.get_json()['scenario']['id']
    assert [s['id'] for s in client.get('/api/scenarios').get_json()] == [sid]

    client.post('/api/controls', json={'advisor': True})
    body = client.post(f"/api/scenarios/{sid}/load").get_json()
    assert body['controls']['advisor'] is False

    assert client.delete(f"/api/scenarios/{sid}").status_code == 200
    assert client.delete(f"/api/scenarios/{sid}").status_code == 404


def test_scenario_needs_name(client):
    assert client.post('/api/scenarios', json={'name': '  '}).status_code == 400


def test_presets_cannot_be_deleted(client):
    assert client.delete('/api/scenarios/preset_0').status_code == 400


def test_load_preset(client):
    body = client.post('/api/scenarios/preset_2/load').get_json()
    assert body['controls']['pmuAdd'] == 15
    assert body['outputs']['totalCapacity'] == 75


def test_load_missing_scenario(client):
    assert client.post('/api/scenarios/scenario_1/load').status_code == 404


def test_compare(client):
    rows = client.get('/api/compare').get_json()
    assert len(rows) == 5
    assert rows[0]['investment'].startswith('$')


def test_export(client):
    res = client.get('/api/export')
    assert res.status_code == 200
    assert res.data[:2] == b'PK'


def test_clamp_logged_once_per_update(client, caplog):
    client.get('/api/outputs')
    with caplog.at_level(logging.WARNING):
        client.post('/api/controls', json={'pmuAdd': 99})
    assert sum('pmuAdd 99 clamped to 15' in r.getMessage() for r in caplog.records) == 1


def test_infinite_controls_rejected(client):
    for field in ('nActive', 'pctGovLed'):
        res = client.post('/api/controls', data=f'{{"{field}": Infinity}}',
                          content_type='application/json')
        assert res.status_code == 400
        assert 'must be finite' in res.get_json()['details'][0]
    assert client.get('/api/controls').get_json()['nActive'] == 50


def test_export_is_served_from_memory(client, tmp_path):
    first = client.get('/api/export')
    second = client.get('/api/export')
    assert first.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert 'Chad2030_Pipeline_Export.xlsx' in first.headers['Content-Disposition']
    assert second.data[:2] == b'PK'
    assert list(tmp_path.iterdir()) == []
