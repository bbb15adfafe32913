"""Tests for sequential batch updates."""

import json

import pytest


ORIGINAL = ".ingest-metadata.json"


@pytest.fixture
def shoot(tmp_path):
    """A raw folder with three clips, one of them missing from the sidecar."""
    from clipsidecar.store import ClipSource

    raw = tmp_path / "raw"
    raw.mkdir()
    doc = {
        "_schema": "2.0",
        "_completed": False,
        "EA001621": {"id": "EA001621", "location": "kitchen", "shotNumber": 1, "shotName": "stale"},
        "EA001622": {"id": "EA001622", "location": "kitchen", "subject": "oven", "shotNumber": 2},
    }
    (raw / ORIGINAL).write_text(json.dumps(doc))
    sources = [ClipSource(f"EA00162{i}.MOV", fallback_folder=raw) for i in (1, 2, 3)]
    return raw, sources


def test_component_updates_reapply_name_fields():
    from clipsidecar.batch import component_updates
    from clipsidecar.records import ClipRecord

    record = ClipRecord(id="A", location="kitchen", shotNumber=3, keywords=["x"])
    assert component_updates(record) == {
        "location": "kitchen", "subject": None, "action": None, "shotType": None, "shotNumber": 3,
    }


def test_apply_batch_counts_results(shoot):
    from clipsidecar.batch import apply_batch
    from clipsidecar.store import SidecarStore

    raw, sources = shoot
    summary = apply_batch(SidecarStore(), sources)
    assert summary.succeeded == 2
    assert summary.failed == 1
    assert summary.failures == [("EA001623.MOV", "no sidecar record")]

    doc = json.loads((raw / ORIGINAL).read_text())
    assert doc["EA001621"]["shotName"] == "kitchen-#1"
    assert doc["EA001622"]["shotName"] == "kitchen-oven-#2"
    assert "EA001623" not in doc


def test_apply_batch_custom_updates(shoot):
    from clipsidecar.batch import apply_batch
    from clipsidecar.store import SidecarStore

    raw, sources = shoot
    apply_batch(SidecarStore(), sources[:2], updates_for=lambda record: {"shotType": "WIDE"})
    doc = json.loads((raw / ORIGINAL).read_text())
    assert doc["EA001621"]["shotName"] == "kitchen-WIDE-#1"
    assert doc["EA001622"]["shotName"] == "kitchen-oven-WIDE-#2"


def test_apply_batch_processes_in_order(shoot):
    from clipsidecar.batch import apply_batch
    from clipsidecar.store import SidecarStore

    _, sources = shoot
    seen = []
    apply_batch(SidecarStore(), sources, on_progress=lambda tracker, source: seen.append((tracker.completed, source.filename)))
    assert seen == [(1, "EA001621.MOV"), (2, "EA001622.MOV"), (3, "EA001623.MOV")]


def test_apply_batch_cancellation_skips_remaining(shoot):
    from clipsidecar.batch import apply_batch
    from clipsidecar.store import SidecarStore

    raw, sources = shoot
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 1

    summary = apply_batch(SidecarStore(), sources, should_cancel=should_cancel)
    assert summary.succeeded == 1
    assert summary.skipped == 2
    assert summary.total == 3
    doc = json.loads((raw / ORIGINAL).read_text())
    assert doc["EA001621"]["shotName"] == "kitchen-#1"
    assert "modifiedAt" not in doc["EA001622"]


def test_apply_batch_write_failure_continues(shoot, tmp_path):
    from clipsidecar.batch import apply_batch
    from clipsidecar.store import ClipSource, SidecarStore

    raw, sources = shoot
    # Readable through the user-edited variant, but no document to write into
    other = tmp_path / "other"
    other.mkdir()
    (other / ".ingest-metadata-pp.json").write_text(json.dumps({"EA009999": {"id": "EA009999"}}))
    orphan = ClipSource("EA009999.MOV", fallback_folder=other)

    summary = apply_batch(SidecarStore(), [orphan, sources[0]])
    assert summary.failures == [("EA009999.MOV", "write failed")]
    assert summary.succeeded == 1


def test_apply_batch_empty():
    from clipsidecar.batch import apply_batch
    from clipsidecar.store import SidecarStore

    summary = apply_batch(SidecarStore(), [])
    assert summary.total == 0


def test_apply_batch_cancellation_logs_remaining(shoot, tmp_path):
    from clipsidecar.batch import apply_batch
    from clipsidecar.logging_config import setup_logging
    from clipsidecar.store import SidecarStore

    _, sources = shoot
    log_path = tmp_path / "batch.log"
    logger = setup_logging(log_file=str(log_path))
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 1

    apply_batch(SidecarStore(), sources, should_cancel=should_cancel)
    for handler in logger.handlers:
        handler.flush()
    assert "Batch cancelled after 1 of 3 clip(s), 2 remaining" in log_path.read_text()
