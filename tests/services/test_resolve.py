"""Tests for OccasionService and the end-to-end pipeline."""

from __future__ import annotations

import json
import random
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

from occasion.domain.models import Command, Condition, Rule, RuleSet, Weekday
from occasion.infrastructure.store import SCHEMA_URL, ConfigStore
from occasion.services.resolve import (
    OccasionService,
    matching_messages,
    render_rule,
    resolve_output,
)
from tests.conftest import rule_for_day, write_config

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses sh")


def _resolve(path: Path, now: date | None = None) -> str:
    result = OccasionService(ConfigStore(path)).resolve(now)
    assert result.ok, result.error
    return result.data["output"]


class TestRenderRule:
    def test_static_message(self) -> None:
        assert render_rule(Rule(message="hi"), date.today(), Weekday.SUNDAY) == "hi"

    def test_nothing_to_render(self) -> None:
        assert render_rule(Rule(), date.today(), Weekday.SUNDAY) is None

    @posix_only
    def test_command_output_replaces_message(self) -> None:
        rule = Rule(message="fallback", command=Command(run="echo dynamic"))
        assert render_rule(rule, date.today(), Weekday.SUNDAY) == "dynamic"

    @posix_only
    def test_failed_command_falls_back(self) -> None:
        rule = Rule(message="fallback", command=Command(run="exit 1"))
        assert render_rule(rule, date.today(), Weekday.SUNDAY) == "fallback"

    @posix_only
    def test_failed_command_without_message(self) -> None:
        rule = Rule(command=Command(run="exit 1"))
        assert render_rule(rule, date.today(), Weekday.SUNDAY) is None


class TestPipeline:
    def test_skips_matching_rule_without_text(self) -> None:
        always = Condition(predicate="true")
        rule_set = RuleSet(rules=(Rule(condition=always), Rule(message="b", condition=always)))
        assert matching_messages(rule_set, date.today()) == ["b"]

    def test_declaration_order(self) -> None:
        always = Condition(predicate="true")
        rule_set = RuleSet(
            rules=tuple(Rule(message=m, condition=always) for m in ["x", "y", "z"])
        )
        assert resolve_output(rule_set, date.today()) == "xyz"

    def test_random_single_match(self) -> None:
        rule_set = RuleSet.model_validate(
            {
                "rules": [
                    {"message": "only", "condition": {"predicate": "true"}},
                    {"message": "never", "condition": {"predicate": "false"}},
                ],
                "multiple_behavior": "random",
            }
        )
        assert resolve_output(rule_set, date.today(), random.Random(3)) == "only"


class TestResolve:
    def test_no_config_creates_default(self, config_path: Path) -> None:
        assert _resolve(config_path) == ""
        written = json.loads(config_path.read_text(encoding="utf-8"))
        assert written["$schema"] == SCHEMA_URL

    def test_single(self, config_path: Path, today: date) -> None:
        write_config(config_path, dates=[rule_for_day("hai", today)])
        assert _resolve(config_path, today) == "hai"

    def test_emoji(self, config_path: Path, today: date) -> None:
        write_config(config_path, dates=[rule_for_day("🐈", today)])
        assert _resolve(config_path, today) == "🐈"

    def test_default_clock(self, config_path: Path) -> None:
        write_config(
            config_path,
            dates=[{"message": "always", "condition": {"predicate": "YEAR >= 2000"}}],
        )
        assert _resolve(config_path) == "always"

    def test_multiple_default_all(self, config_path: Path, today: date) -> None:
        write_config(
            config_path,
            dates=[rule_for_day("hai", today), rule_for_day("hewwo :3", today)],
        )
        assert _resolve(config_path, today) == "haihewwo :3"

    def test_multiple_first(self, config_path: Path, today: date) -> None:
        write_config(
            config_path,
            dates=[rule_for_day("hai", today), rule_for_day("hewwo :3", today)],
            multiple_behavior="first",
        )
        assert _resolve(config_path, today) == "hai"

    def test_multiple_last(self, config_path: Path, today: date) -> None:
        write_config(
            config_path,
            dates=[rule_for_day("hai", today), rule_for_day("hewwo :3", today)],
            multiple_behavior="last",
        )
        assert _resolve(config_path, today) == "hewwo :3"

    def test_multiple_all_newline(self, config_path: Path, today: date) -> None:
        write_config(
            config_path,
            dates=[rule_for_day("hai", today), rule_for_day("hewwo :3", today)],
            multiple_behavior={"all": {"seperator": "\n"}},
        )
        assert _resolve(config_path, today) == "hai\nhewwo :3"

    def test_not_today(self, config_path: Path, today: date) -> None:
        write_config(config_path, dates=[rule_for_day("hai", today + timedelta(days=1))])
        assert _resolve(config_path, today) == ""

    def test_predicate_only_every_day(self, config_path: Path) -> None:
        write_config(config_path, dates=[{"message": "hi", "condition": {"predicate": "true"}}])
        store = ConfigStore(config_path)
        start = date(2025, 1, 1)
        for n in range(0, 365, 7):
            result = OccasionService(store).resolve(start + timedelta(days=n))
            assert result.data["output"] == "hi"

    def test_matched_count(self, config_path: Path, today: date) -> None:
        write_config(config_path, dates=[rule_for_day("a", today), rule_for_day("b", today)])
        result = OccasionService(ConfigStore(config_path)).resolve(today)
        assert result.data["matched"] == 2

    def test_imported_rules(self, config_path: Path, tmp_path: Path, today: date) -> None:
        write_config(tmp_path / "extra.json", dates=[rule_for_day("imported", today)])
        write_config(
            config_path,
            dates=[rule_for_day("own", today)],
            imports=["extra.json", "missing.json"],
            multiple_behavior={"all": {"seperator": " "}},
        )
        result = OccasionService(ConfigStore(config_path)).resolve(today)
        assert result.ok
        assert result.data["output"] == "own imported"
        assert len(result.warnings) == 1

    def test_load_error(self, config_path: Path) -> None:
        config_path.write_text("{nope", encoding="utf-8")
        result = OccasionService(ConfigStore(config_path)).resolve()
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "DESERIALIZE_ERROR"

    @posix_only
    def test_command_message(self, config_path: Path, today: date) -> None:
        rule = rule_for_day("static", today)
        rule["command"] = {"run": 'echo "day $DAY_OF_MONTH"'}
        write_config(config_path, dates=[rule])
        assert _resolve(config_path, today) == f"day {today.day}"


class TestValidate:
    def test_reports_tree(self, config_path: Path, tmp_path: Path) -> None:
        write_config(tmp_path / "a.json", dates=[{"message": "a"}], week_start_day="Mon")
        write_config(config_path, dates=[{"message": "root"}], imports=["a.json"])
        result = OccasionService(ConfigStore(config_path)).validate()
        assert result.ok
        assert result.data["rules"] == 2
        assert result.data["week_start_day"] == "Monday"
        assert result.data["multiple_behavior"] == {"all": {"seperator": ""}}

    def test_does_not_create(self, config_path: Path) -> None:
        result = OccasionService(ConfigStore(config_path)).validate()
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert not config_path.exists()


class TestInit:
    def test_creates(self, config_path: Path) -> None:
        result = OccasionService(ConfigStore(config_path)).init()
        assert result.ok
        assert result.data["created"] is True
        assert config_path.is_file()

    def test_existing_untouched(self, config_path: Path) -> None:
        config_path.write_text("{}", encoding="utf-8")
        result = OccasionService(ConfigStore(config_path)).init()
        assert result.ok
        assert result.data["created"] is False
        assert result.warnings
        assert config_path.read_text() == "{}"
