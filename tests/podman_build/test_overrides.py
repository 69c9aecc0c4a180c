"""Tests for merging explicit options with property overrides."""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from podman_build.overrides import (
    BUILD_ARG_PREFIX,
    ULIMITS_PREFIX,
    merge_overrides,
    properties_with_prefix,
)


@pytest.fixture
def debug_logs():
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG)
    )
    with capture_logs() as logs:
        yield logs
    structlog.reset_defaults()


class TestPropertiesWithPrefix:
    def test_prefix_is_stripped(self):
        found = properties_with_prefix(
            {"podman.buildArg.VERSION": "1.0", "HOME": "/root"}, BUILD_ARG_PREFIX
        )
        assert found == {"VERSION": "1.0"}

    def test_empty_and_missing_values_are_skipped(self):
        found = properties_with_prefix(
            {"podman.buildArg.EMPTY": "", "podman.buildArg.NONE": None},
            BUILD_ARG_PREFIX,
        )
        assert found == {}

    def test_bare_prefix_is_skipped(self):
        assert properties_with_prefix({"podman.buildArg.": "x"}, BUILD_ARG_PREFIX) == {}

    def test_keys_are_sorted(self):
        found = properties_with_prefix(
            {"podman.buildUlimits.nproc": "1", "podman.buildUlimits.core": "0"},
            ULIMITS_PREFIX,
        )
        assert list(found) == ["core", "nproc"]

    def test_prefix_match_is_case_sensitive(self):
        assert properties_with_prefix({"podman.buildarg.A": "1"}, BUILD_ARG_PREFIX) == {}


class TestMergeOverrides:
    def test_property_wins_on_collision(self):
        merged = merge_overrides(
            {"A": "1"}, {"podman.buildArg.A": "2"}, BUILD_ARG_PREFIX
        )
        assert merged == {"A": "2"}

    def test_overridden_key_keeps_its_position(self):
        merged = merge_overrides(
            {"A": "1", "B": "2"},
            {"podman.buildArg.A": "override", "podman.buildArg.C": "3"},
            BUILD_ARG_PREFIX,
        )
        assert list(merged.items()) == [("A", "override"), ("B", "2"), ("C", "3")]

    def test_explicit_entries_without_properties(self):
        merged = merge_overrides({"A": "1", "B": "2"}, {}, BUILD_ARG_PREFIX)
        assert merged == {"A": "1", "B": "2"}

    def test_other_prefix_is_ignored(self):
        merged = merge_overrides(
            {"nofile": "1024"}, {"podman.buildArg.nofile": "1"}, ULIMITS_PREFIX
        )
        assert merged == {"nofile": "1024"}

    def test_returns_new_mapping(self):
        explicit = {"A": "1"}
        merged = merge_overrides(explicit, {"podman.buildArg.B": "2"}, BUILD_ARG_PREFIX)
        assert merged is not explicit
        assert explicit == {"A": "1"}

    def test_collision_is_logged_without_value(self, debug_logs):
        merge_overrides(
            {"A": "1", "B": "2"},
            {"podman.buildArg.A": "secret", "podman.buildArg.C": "3"},
            BUILD_ARG_PREFIX,
        )
        events = [
            log for log in debug_logs if log["event"] == "explicit value overridden by property"
        ]
        assert len(events) == 1
        assert events[0]["log_level"] == "debug"
        assert events[0]["key"] == "A"
        assert events[0]["prefix"] == BUILD_ARG_PREFIX
        assert "secret" not in events[0].values()
