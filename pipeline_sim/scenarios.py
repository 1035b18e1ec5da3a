"""
Chad 2030 Pipeline Simulator — Saved Scenario Store
JSON-file key-value persistence for user scenarios. Presets are never
written; at most MAX_USER_SCENARIOS user scenarios are kept.
"""
import json
import logging
import os
import time
import uuid
from datetime import datetime, timezone

STORAGE_KEY = 'chad2030_scenarios'
MAX_USER_SCENARIOS = 4


def build_scenario(name, controls, outputs, now=None):
    now = now or datetime.now(timezone.utc)
    return {
        'id': f"scenario_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:6]}",
        'name': name,
        'createdAt': now.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
        'controls': dict(controls),
        'outputs': outputs,
        'isPreset': False,
    }


class ScenarioStore:
    def __init__(self, path):
        self.path = path

    def load(self):
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, encoding='utf-8') as f:
                doc = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"ScenarioStore: cannot read {self.path} ({e}); starting empty")
            return []
        scenarios = doc.get(STORAGE_KEY, []) if isinstance(doc, dict) else []
        return [s for s in scenarios if isinstance(s, dict) and not s.get('isPreset')]

    def _write(self, scenarios):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        tmp = f"{self.path}.{os.getpid()}.{int(time.time() * 1000)}.tmp"
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump({STORAGE_KEY: scenarios}, f, default=str)
        os.replace(tmp, self.path)

    def save(self, scenario):
        """False when the scenario is a preset or the user limit is reached."""
        if scenario.get('isPreset'):
            return False
        scenarios = self.load()
        if len(scenarios) >= MAX_USER_SCENARIOS:
            logging.info(f"ScenarioStore: limit of {MAX_USER_SCENARIOS} reached, '{scenario['name']}' not saved")
            return False
        scenarios.append(scenario)
        self._write(scenarios)
        return True

    def get(self, scenario_id):
        for s in self.load():
            if s['id'] == scenario_id:
                return s
        return None

    def delete(self, scenario_id):
        scenarios = self.load()
        kept = [s for s in scenarios if s['id'] != scenario_id]
        if len(kept) == len(scenarios):
            return False
        self._write(kept)
        return True
