"""Lightweight CLI helpers for inspecting sessions and running the enhancement backfill."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from api_server import configure_models
from config.settings import settings
from services.backfill import backfill_enhanced_results
from storage.migrate import migrate
from storage.sessions import recent_sessions


def tail_sessions(limit: int = 20) -> None:
    for session in recent_sessions(limit):
        state = session.interview_state
        results = session.results
        outcome = (
            f"default={results.default_archetype.value} authentic={results.authentic_archetype.value}"
            if results
            else "unscored"
        )
        print(
            f"[{session.updated_at}] {session.id} {session.participant_name} "
            f"{state.phase}:{state.current_question_index} {outcome} "
            f"reflection={session.reflection_status} enhanced={session.enhanced_results is not None}"
        )


def run_backfill(delay: Optional[float] = None) -> None:
    configure_models(Path(settings.LLM_CONFIG_PATH))
    report = backfill_enhanced_results(delay_s=delay)
    print(
        f"processed={report.processed} succeeded={report.succeeded} "
        f"failed={report.failed} skipped={report.skipped}"
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-sessions", type=int, help="Show the most recently updated sessions")
    parser.add_argument("--backfill-enhanced", action="store_true", help="Enhance completed reflections missing results")
    parser.add_argument("--delay", type=float, help="Seconds between backfill model calls")
    args = parser.parse_args(argv)

    migrate(settings.DB_PATH)
    if args.tail_sessions:
        tail_sessions(args.tail_sessions)
    if args.backfill_enhanced:
        run_backfill(args.delay)


if __name__ == "__main__":
    main()
