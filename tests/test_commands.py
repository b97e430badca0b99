"""Tests for command builders, cache keys and the argument filter."""

from __future__ import annotations

import shlex

import pytest

from cmdreport.config import Settings
from cmdreport.models.commands import CommandSpec, ExecutionResult
from cmdreport.services import report_commands as rc
from cmdreport.services.command_filter import (
    check_argument,
    check_search_replace,
    check_search_replace_options,
    check_section,
)


@pytest.fixture
def cfg():
    return Settings(
        report_wp_cli_path="/usr/local/bin/wp",
        report_site_path="/data/wordpress/htdocs",
        report_site_url="https://example.com",
        report_auto_commands={"php_version": "php -v"},
        report_auto_allow_failure=["php_version"],
    )


class TestCacheKey:
    def test_dry_and_real_differ(self):
        dry = rc.cache_key("search_replace", {"from": "a", "to": "b", "dry_run": True})
        real = rc.cache_key("search_replace", {"from": "a", "to": "b", "dry_run": False})
        assert dry != real
        assert dry.startswith("search_replace:dry:")
        assert real.startswith("search_replace:run:")

    def test_order_independent(self):
        a = rc.cache_key("s", {"x": 1, "y": 2})
        b = rc.cache_key("s", {"y": 2, "x": 1})
        assert a == b

    def test_params_change_key(self):
        assert rc.cache_key("s", {"from": "a"}) != rc.cache_key("s", {"from": "b"})

    def test_no_mode_without_dry_run(self):
        assert rc.cache_key("db_tables", {}).count(":") == 1


class TestSearchReplace:
    def test_dry_run_command(self, cfg):
        spec = rc.search_replace_command("old", "new", {"dry_run": True}, cfg=cfg)
        args = shlex.split(spec.command)
        assert args[:2] == ["/usr/local/bin/wp", "--path=/data/wordpress/htdocs"]
        assert args[2:5] == ["search-replace", "old", "new"]
        assert "--dry-run" in args
        assert "--url=https://example.com" in args
        assert spec.echo.startswith("wp search-replace old new")
        assert "--path" not in spec.echo

    def test_flags(self, cfg):
        spec = rc.search_replace_command(
            "a", "b", {"dry_run": False, "all_tables": True, "network": True}, cfg=cfg,
        )
        args = shlex.split(spec.command)
        assert "--dry-run" not in args
        assert "--all-tables" in args
        assert "--network" in args

    def test_arguments_are_quoted(self, cfg):
        spec = rc.search_replace_command("http://old site", "x; rm -rf /", {}, cfg=cfg)
        args = shlex.split(spec.command)
        assert "http://old site" in args
        assert "x; rm -rf /" in args


class TestOtherCommands:
    def test_cleanup_dry_run(self, cfg):
        assert rc.db_cleanup_command({"dry_run": True}, cfg=cfg).command == "wp-db-cleanup --dry-run"
        assert rc.db_cleanup_command({"dry_run": False}, cfg=cfg).command == "wp-db-cleanup"

    def test_db_tables_uses_configured_wp(self, cfg):
        spec = rc.db_tables_command(cfg=cfg)
        assert spec.command.startswith("/usr/local/bin/wp --path=/data/wordpress/htdocs db size")
        assert spec.echo == "wp db size --tables --size_format=b"

    def test_backup_command(self, cfg):
        assert rc.backup_command(cfg=cfg).command == "wp-backup"
        assert rc.backup_command(cfg=cfg.model_copy(update={"report_backup_command": ""})) is None

    def test_auto_command(self, cfg):
        spec = rc.auto_command("php_version", cfg=cfg)
        assert spec.command == "php -v"
        assert spec.allow_failure is True
        assert rc.auto_command("unknown", cfg=cfg) is None


class TestModels:
    def test_spec_is_frozen(self):
        spec = CommandSpec(command="wp db size")
        with pytest.raises(Exception):
            spec.command = "other"  # type: ignore[misc]

    def test_with_echo_skips_empty_output(self):
        result = ExecutionResult(command="c", exit_code=0, succeeded=True)
        assert result.with_echo("c") is result

    def test_with_echo_prepends(self):
        result = ExecutionResult(command="c", exit_code=0, stdout_lines=("h",), succeeded=True)
        assert result.with_echo("wp c").stdout_lines == ("wp c", "h")


class TestFilter:
    def test_empty_from_denied(self):
        assert not check_search_replace("", "x")

    def test_identical_denied(self):
        assert not check_search_replace("same", "same")

    def test_option_injection_denied(self):
        assert not check_search_replace("--all-tables", "x")
        assert not check_search_replace("a", "--network")

    def test_empty_to_allowed(self):
        assert check_search_replace("remove-me", "")

    def test_control_characters(self):
        assert not check_argument("a\x00b")
        assert check_argument("tab\tand newline\n")

    def test_section_names(self):
        assert check_section("php_version")
        assert not check_section("../etc")
        assert not check_section("")

    def test_real_run_across_all_tables_denied(self):
        assert not check_search_replace_options({"dry_run": False, "all_tables": True})
        assert not check_search_replace_options(
            {"dry_run": False, "all_tables": True, "skip_backup": True},
        )

    def test_dry_run_across_all_tables_allowed(self):
        assert check_search_replace_options({"dry_run": True, "all_tables": True})
        assert check_search_replace_options({"dry_run": False, "all_tables": False})


def test_dry_run_params_ignore_skip_backup():
    with_backup = rc.search_replace_params("a", "b", {"dry_run": True, "skip_backup": False})
    without = rc.search_replace_params("a", "b", {"dry_run": True, "skip_backup": True})
    assert with_backup == without
    assert "skip_backup" not in with_backup
    real = rc.search_replace_params("a", "b", {"dry_run": False, "skip_backup": True})
    assert real["skip_backup"] is True
