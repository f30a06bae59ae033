"""Turn terminated process handles into output records."""

from __future__ import annotations

import logging

from meanwhile.orchestrator.errors import CollectionError
from meanwhile.orchestrator.models import BackgroundTaskRecord, TaskState

logger = logging.getLogger(__name__)


def collect_output(record: BackgroundTaskRecord) -> bool:
    """Wait on the record's handle and store its result.

    Returns False when the wait failed; the record is then marked
    ``COLLECTION_FAILED`` and its handle released.
    """

    handle = record.handle
    if handle is None:
        record.state = TaskState.COLLECTION_FAILED
        record.failure = "no process handle"
        return False

    try:
        result = handle.wait_for_exit()
    except CollectionError as error:
        logger.error("%s (command=%r)", error, record.spec.describe())
        record.state = TaskState.COLLECTION_FAILED
        record.failure = str(error)
        record.handle = None
        return False

    record.result = result
    record.state = TaskState.COLLECTED
    record.handle = None
    logger.debug(
        "Collected pid=%d exit_status=%d stdout=%dB stderr=%dB",
        handle.pid,
        result.exit_status,
        len(result.stdout),
        len(result.stderr),
    )
    return True
