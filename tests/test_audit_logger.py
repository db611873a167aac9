"""
Tests for Audit Logger — JSON-lines writes and recent-entry reads.
"""

import json

from ipscore.audit.logger import AuditLogger
from ipscore.models.analysis_models import AuditEntry


def entry(run_id: str, score: int = 100) -> AuditEntry:
    return AuditEntry(
        run_id=run_id,
        ip="8.8.8.8",
        final_score=score,
        risk_factor_count=0,
        threats_flagged=0,
        proxy_type="direct",
    )


def test_log_appends_one_line_per_run(tmp_path):
    path = tmp_path / "audit.jsonl"
    audit = AuditLogger(str(path), enabled=True)
    audit.log(entry("aaaa1111", 98))
    audit.log(entry("bbbb2222", 40))

    lines = path.read_text().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["run_id"] == "aaaa1111"
    assert first["final_score"] == 98
    assert first["timestamp"].endswith("Z")


def test_disabled_logger_writes_nothing(tmp_path):
    path = tmp_path / "audit.jsonl"
    AuditLogger(str(path), enabled=False).log(entry("aaaa1111"))
    assert not path.exists()


def test_read_recent_keeps_last_entries_in_order(tmp_path):
    audit = AuditLogger(str(tmp_path / "audit.jsonl"), enabled=True)
    for i in range(5):
        audit.log(entry(f"run{i}"))

    assert [e["run_id"] for e in audit.read_recent(3)] == ["run2", "run3", "run4"]
    assert len(audit.read_recent(50)) == 5
    assert audit.read_recent(0) == []


def test_read_recent_skips_corrupt_lines(tmp_path):
    path = tmp_path / "audit.jsonl"
    audit = AuditLogger(str(path), enabled=True)
    audit.log(entry("good0001"))
    with path.open("a") as f:
        f.write("{not json\n\n")
    audit.log(entry("good0002"))

    assert [e["run_id"] for e in audit.read_recent(10)] == ["good0001", "good0002"]


def test_read_recent_missing_file(tmp_path):
    assert AuditLogger(str(tmp_path / "none.jsonl"), enabled=True).read_recent() == []
