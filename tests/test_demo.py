"""
Tests for scripts/demo.py.
"""

import importlib.util
import json
from pathlib import Path

import pytest

import zlog

DEMO_PATH = Path(__file__).resolve().parent.parent / "scripts" / "demo.py"


@pytest.fixture
def demo():
    spec = importlib.util.spec_from_file_location("zlog_demo", DEMO_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _records(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestDemo:
    def test_writes_all_sections(self, demo, tmp_path):
        out = tmp_path / "demo.jsonl"
        demo.main(["--output", str(out)])
        zlog.get_sink().flush()

        records = _records(out)
        assert len(records) == 11

        before, after = records[:4], records[4:8]
        assert all("source" not in r for r in before)
        assert all("source" in r for r in after)
        assert "callstack" in after[0] and len(after[0]["callstack"]) <= 8

        failure = records[8]
        assert failure["segment"] == "order/process"
        assert failure["msg"] == "taskId: task-789"
        assert failure["app_ctx"] == {"userID": "12345", "requestID": "req-abc-123"}
        assert "order-456" in failure["error_msg"]
        assert "process_payment @ " in records[9]["source"]

    def test_policy_file_replaces_demo_policy(self, demo, tmp_path):
        policy = tmp_path / "policy.json"
        policy.write_text(json.dumps({"info": {"autoSource": True}}), encoding="utf-8")
        out = tmp_path / "demo.jsonl"

        demo.main(["--output", str(out), "--config", str(policy)])
        zlog.get_sink().flush()

        after = _records(out)[4:8]
        assert [("source" in r) for r in after] == [False, False, False, True]
