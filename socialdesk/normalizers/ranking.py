# socialdesk/normalizers/ranking.py
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from .rules import parse_timestamp
from .types import SessionHistory, SuccessAttempt, ThreadsAccount

A = TypeVar("A", bound=SuccessAttempt)


def pick_latest(attempts: Sequence[A]) -> Optional[A]:
    """
    Most recent attempt by `last_attempt_at`.

    The first attempt is the best so far no matter what its timestamp looks like.
    After that a challenger wins only with a parseable timestamp that is strictly
    later than the best one, or when the best one has no parseable timestamp.
    With no usable timestamps at all, the first attempt in source order is returned.
    """
    best: Optional[A] = None
    best_at: Optional[datetime] = None
    for attempt in attempts:
        if best is None:
            best, best_at = attempt, parse_timestamp(attempt.last_attempt_at)
            continue
        at = parse_timestamp(attempt.last_attempt_at)
        if at is None:
            continue
        if best_at is None or at > best_at:
            best, best_at = attempt, at
    return best


def derive_sort_key(history: SessionHistory) -> Optional[str]:
    """
    Timestamp used to order an account by its most recent relevant session.

    Any success beats any failure, even an older one: the latest success's
    timestamp wins if it has one, otherwise the latest failure's, otherwise None.
    """
    success = pick_latest(history.successes)
    if success is not None and success.last_attempt_at:
        return success.last_attempt_at
    failure = pick_latest(history.failures)
    if failure is not None and failure.last_attempt_at:
        return failure.last_attempt_at
    return None


def rank_accounts(accounts: Sequence[ThreadsAccount]) -> List[ThreadsAccount]:
    """New list, newest sort key first; accounts without a parseable key keep their order at the end."""
    dated = []
    undated = []
    for account in accounts:
        at = parse_timestamp(account.sort_key)
        if at is None:
            undated.append(account)
        else:
            dated.append((at, account))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [account for _, account in dated] + undated
