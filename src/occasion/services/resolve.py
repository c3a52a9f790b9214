"""OccasionService: the single-pass resolution pipeline.

ConfigStore → RuleSet → match each rule → render matching rules →
selection policy → one output string. Stateless apart from the store:
the output is a function of ``(RuleSet, now)``.
"""

from __future__ import annotations

import logging
import random
from datetime import date, datetime

from occasion.domain.models import Rule, RuleSet, Weekday
from occasion.domain.selection import select_output
from occasion.errors import ConfigError
from occasion.infrastructure.shell import run_command
from occasion.infrastructure.store import ConfigStore
from occasion.services.conditions import rule_matches
from occasion.services.result import ServiceResult

logger = logging.getLogger(__name__)


def render_rule(rule: Rule, now: date, week_start_day: Weekday) -> str | None:
    """Command output when the command produced some, else the static message."""
    if rule.command is not None:
        output = run_command(rule.command, now, week_start_day)
        if output is not None:
            return output
    return rule.message


def matching_messages(rule_set: RuleSet, now: date) -> list[str]:
    """Rendered text of every matching rule, in declaration order."""
    messages: list[str] = []
    for index, rule in enumerate(rule_set.rules):
        if not rule_matches(rule, now, rule_set.week_start_day):
            continue
        text = render_rule(rule, now, rule_set.week_start_day)
        if text is None:
            logger.debug("Rule %d matched but has nothing to show", index)
            continue
        messages.append(text)
    return messages


def resolve_output(
    rule_set: RuleSet,
    now: date,
    rng: random.Random | None = None,
) -> str:
    return select_output(rule_set.multiple_behavior, matching_messages(rule_set, now), rng)


class OccasionService:
    """Runs the pipeline against a :class:`ConfigStore`.

    Usage::

        store = ConfigStore(resolve_config_path(settings.config))
        result = OccasionService(store).resolve()
        print(result.data["output"])
    """

    def __init__(self, store: ConfigStore, *, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng

    def resolve(self, now: date | None = None) -> ServiceResult:
        """Resolve the output for *now* (default: the local current time).

        A missing root document is created and yields an empty output.
        """
        op = "resolve"
        try:
            rule_set = self._store.load_or_create()
        except ConfigError as exc:
            return ServiceResult.failure(op, exc, self._store.warnings)

        when = now if now is not None else datetime.now().astimezone()
        messages = matching_messages(rule_set, when)
        output = select_output(rule_set.multiple_behavior, messages, self._rng)
        return ServiceResult(
            ok=True,
            op=op,
            data={"output": output, "matched": len(messages)},
            warnings=list(self._store.warnings),
        )

    def validate(self) -> ServiceResult:
        """Load the whole tree without evaluating anything."""
        op = "validate"
        try:
            rule_set = self._store.load()
        except ConfigError as exc:
            return ServiceResult.failure(op, exc, self._store.warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(self._store.path),
                "rules": len(rule_set.rules),
                "multiple_behavior": rule_set.multiple_behavior.model_dump(mode="json"),
                "week_start_day": rule_set.week_start_day.value,
            },
            warnings=list(self._store.warnings),
        )

    def init(self) -> ServiceResult:
        """Write the default document unless one already exists."""
        op = "init"
        path = self._store.path
        if path.exists():
            return ServiceResult(
                ok=True,
                op=op,
                data={"path": str(path), "created": False},
                warnings=[f"{path} already exists, left untouched"],
            )
        try:
            self._store.save_default()
        except ConfigError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"path": str(path), "created": True})
