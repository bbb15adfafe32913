"""Sequential batch updates across many clips."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping

from clipsidecar.records import ClipRecord, NAME_COMPONENTS
from clipsidecar.store import ClipSource, SidecarStore
from clipsidecar.ui import ProgressTracker, StepSummary

logger = logging.getLogger(__name__)

UpdateFunc = Callable[[ClipRecord], Mapping]
ProgressFunc = Callable[[ProgressTracker, ClipSource], None]


def component_updates(record: ClipRecord) -> dict:
    """Updates that re-apply a record's own name components.

    Writing these back recomputes ``shotName`` and refreshes the modified
    stamp without changing any descriptive field.
    """
    return {name: getattr(record, name) for name in (*NAME_COMPONENTS, "shotNumber")}


def apply_batch(
    store: SidecarStore,
    sources: Iterable[ClipSource],
    updates_for: UpdateFunc = component_updates,
    should_cancel: Callable[[], bool] | None = None,
    on_progress: ProgressFunc | None = None,
    step_name: str = "Apply",
) -> StepSummary:
    """Read then write each clip in turn, accumulating results in a summary.

    Clips are processed one at a time so that no two writes race on the
    same document. ``should_cancel`` is checked before each clip; once it
    returns True the remaining clips are recorded as skipped. A clip with
    no readable record is recorded as a failure and does not stop the batch.
    """
    sources = list(sources)
    summary = StepSummary(step_name)
    tracker = ProgressTracker(total=len(sources), label=step_name)

    for index, source in enumerate(sources):
        if should_cancel is not None and should_cancel():
            logger.info(
                "Batch cancelled after %d of %d clip(s), %d remaining",
                index, len(sources), tracker.remaining,
            )
            for remaining in sources[index:]:
                summary.record_skip(remaining.filename, "cancelled")
            break

        record = store.read(source)
        if record is None:
            summary.record_failure(source.filename, "no sidecar record")
        elif store.write(source, updates_for(record)):
            summary.record_success(source.filename)
        else:
            summary.record_failure(source.filename, "write failed")

        tracker.advance()
        if on_progress is not None:
            on_progress(tracker, source)

    logger.info(summary.render())
    return summary
