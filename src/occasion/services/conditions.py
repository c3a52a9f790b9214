"""ConditionEvaluator: decide whether a rule matches at a given instant.

A rule's ``time`` and ``condition`` are combined with the rule's merge
strategy; a condition's ``shell`` and ``predicate`` with the condition's.
A rule with neither ``time`` nor ``condition`` never matches, and neither
does an empty condition.
"""

from __future__ import annotations

import logging
from datetime import date

from occasion.domain.models import Condition, Rule, Weekday
from occasion.domain.predicate import PredicateError, evaluate_predicate
from occasion.domain.timespec import calendar_variables, evaluate_time
from occasion.infrastructure.shell import command_succeeds

logger = logging.getLogger(__name__)


def predicate_holds(predicate: str, now: date, week_start_day: Weekday) -> bool:
    """Evaluate *predicate*; any parse or evaluation error is False."""
    try:
        return evaluate_predicate(predicate, calendar_variables(now, week_start_day))
    except PredicateError as exc:
        logger.debug("Predicate %r failed: %s", predicate, exc)
        return False


def evaluate_condition(condition: Condition, now: date, week_start_day: Weekday) -> bool:
    shell, predicate = condition.shell, condition.predicate
    if shell is not None and predicate is not None:
        return condition.merge_strategy.apply(
            command_succeeds(shell, now, week_start_day),
            predicate_holds(predicate, now, week_start_day),
        )
    if shell is not None:
        return command_succeeds(shell, now, week_start_day)
    if predicate is not None:
        return predicate_holds(predicate, now, week_start_day)
    return False


def rule_matches(rule: Rule, now: date, week_start_day: Weekday) -> bool:
    if rule.time is not None and rule.condition is not None:
        return rule.merge_strategy.apply(
            evaluate_time(rule.time, now),
            evaluate_condition(rule.condition, now, week_start_day),
        )
    if rule.time is not None:
        return evaluate_time(rule.time, now)
    if rule.condition is not None:
        return evaluate_condition(rule.condition, now, week_start_day)
    return False
