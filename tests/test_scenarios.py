import json
from datetime import datetime, timezone

from pipeline_sim.scenarios import STORAGE_KEY, MAX_USER_SCENARIOS, build_scenario
from pipeline_sim.simulation import run_simulation


def _scenario(name, seconds):
    now = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return build_scenario(name, {'advisor': True}, {'nFid': 1}, now=now)


def test_build_scenario_ids_and_timestamp():
    now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    s = build_scenario('Test', {'advisor': True}, {'nFid': 1}, now=now)
    assert s['id'].startswith(f"scenario_{int(now.timestamp() * 1000)}_")
    assert s['createdAt'] == '2026-01-02T03:04:05.000Z'
    assert s['isPreset'] is False


def test_empty_store(store):
    assert store.load() == []
    assert store.get('scenario_1') is None


def test_save_and_reload(store, controls):
    s = build_scenario('Default', controls, run_simulation(controls)['outputs'])
    assert store.save(s) is True
    loaded = store.load()
    assert len(loaded) == 1
    assert loaded[0]['outputs']['nFid'] == s['outputs']['nFid']
    with open(store.path, encoding='utf-8') as f:
        assert STORAGE_KEY in json.load(f)


def test_user_limit(store):
    for i in range(MAX_USER_SCENARIOS):
        assert store.save(_scenario(f"s{i}", 1000 + i))
    assert store.save(_scenario('one too many', 2000)) is False
    assert len(store.load()) == MAX_USER_SCENARIOS


def test_presets_never_persisted(store):
    preset = dict(_scenario('p', 1000), isPreset=True)
    assert store.save(preset) is False
    assert store.load() == []


def test_delete(store):
    s = _scenario('gone', 1000)
    store.save(s)
    assert store.delete(s['id']) is True
    assert store.delete(s['id']) is False
    assert store.load() == []


def test_corrupt_file_reads_as_empty(store):
    with open(store.path, 'w', encoding='utf-8') as f:
        f.write('{not json')
    assert store.load() == []


def test_preset_entries_in_file_are_ignored(store):
    with open(store.path, 'w', encoding='utf-8') as f:
        json.dump({STORAGE_KEY: [dict(_scenario('p', 1), isPreset=True), _scenario('u', 2)]}, f)
    assert [s['name'] for s in store.load()] == ['u']


def test_same_instant_saves_get_distinct_ids(store):
    now = datetime(2026, 1, 2, tzinfo=timezone.utc)
    a = build_scenario('A', {}, {'nFid': 1}, now=now)
    b = build_scenario('B', {}, {'nFid': 2}, now=now)
    assert a['id'] != b['id']
    store.save(a)
    store.save(b)
    assert store.delete(a['id']) is True
    assert [s['name'] for s in store.load()] == ['B']
