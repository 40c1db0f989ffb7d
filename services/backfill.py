"""Sequential backfill of enhanced results for completed reflections."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from pydantic import BaseModel

from agents.enhancement_agent import EnhancementResponse, synthesize as default_synthesize
from config.settings import settings
from observability.logger import log_event
from storage.sessions import CoachingSession, StaleSessionError, list_pending_enhancements, save_enhanced_results


logger = logging.getLogger(__name__)

Synthesizer = Callable[..., EnhancementResponse]


class BackfillReport(BaseModel):
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0


def _skip_reason(session: CoachingSession) -> Optional[str]:
    if session.results is None:
        return "missing results"
    if not session.reflection_messages:
        return "missing reflection messages"
    return None


def backfill_enhanced_results(
    *,
    synthesize: Synthesizer = default_synthesize,
    delay_s: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BackfillReport:
    """Enhance every pending session one at a time, pausing between model calls.

    A failing session is logged and counted; the batch carries on.
    """

    delay = settings.BACKFILL_DELAY_SECONDS if delay_s is None else delay_s
    report = BackfillReport()
    pending = list_pending_enhancements()
    logger.info("Backfill found %d pending sessions", len(pending))

    called = False
    for session in pending:
        reason = _skip_reason(session)
        if reason:
            report.skipped += 1
            log_event("backfill.skip", session.id, outcome="skipped", error=reason)
            continue

        if called and delay > 0:
            sleep(delay)
        called = True
        report.processed += 1
        outcome = synthesize(
            session.results,
            session.reflection_messages,
            session.participant_name,
            session.tenant,
        )
        if not outcome.success or outcome.enhanced is None:
            report.failed += 1
            log_event("backfill.fail", session.id, level=logging.WARNING, outcome="failed", error=outcome.error)
            continue
        try:
            save_enhanced_results(session.id, outcome.enhanced, expected_version=session.version)
        except StaleSessionError as exc:
            report.failed += 1
            log_event("backfill.fail", session.id, level=logging.WARNING, outcome="stale", error=str(exc))
            continue
        report.succeeded += 1
        log_event("backfill.ok", session.id, outcome="enhanced")

    logger.info(
        "Backfill done processed=%d succeeded=%d failed=%d skipped=%d",
        report.processed,
        report.succeeded,
        report.failed,
        report.skipped,
    )
    return report


__all__ = ["BackfillReport", "backfill_enhanced_results"]
