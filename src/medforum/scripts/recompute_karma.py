"""Recompute karma for every user (or selected users) from the vote ledger.

Run after a data migration or ledger repair. Each user is recomputed in its
own transaction; a failure for one user is reported and the batch continues.
"""
from __future__ import annotations

import argparse
import logging
import sys

from medforum.core.settings import settings
from medforum.db.session import SessionLocal
from medforum.services import ForumServices, KarmaBatchResult

logger = logging.getLogger(__name__)


def recompute(user_ids: list[int] | None = None, top: int = 10) -> KarmaBatchResult:
    """Recompute karma and log the resulting leaderboard."""
    with SessionLocal() as session:
        services = ForumServices.from_session(session, settings)
        result = services.karma.recompute_all(user_ids or None)

        for row in services.karma.leaderboard(top):
            logger.info(
                "%d. %s (user %s): %s total (post %s, comment %s, award %s)",
                row.rank,
                row.username,
                row.karma.user_id,
                row.karma.total_karma,
                row.karma.post_karma,
                row.karma.comment_karma,
                row.karma.award_karma,
            )
    return result


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Recompute user karma from the vote ledger")
    parser.add_argument(
        "--user",
        dest="user_ids",
        type=int,
        action="append",
        help="Recompute only this user id (repeatable). Defaults to every user.",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="How many leaderboard entries to log after the pass.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log per-user results.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    result = recompute(args.user_ids, top=args.top)
    logger.info(
        "Recomputed karma for %d users, %d failures",
        len(result.snapshots),
        len(result.failures),
    )
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
