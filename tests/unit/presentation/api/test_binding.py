"""Tests for lenient optional-id binding."""

import logging

import pytest

from mathquest.presentation.api.binding import parse_optional_id


class TestParseOptionalId:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, None),
            ("", None),
            ("   ", None),
            ("undefined", None),
            ("null", None),
            ("NULL", None),
            ("Undefined", None),
            ("3", 3),
            (" 2 ", 2),
            ("-1", -1),
            ("+4", 4),
        ],
    )
    def test_values(self, raw, expected):
        assert parse_optional_id(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", "2x", "0x10"])
    def test_unparseable_value_logs_warning_and_binds_none(self, raw, caplog):
        with caplog.at_level(logging.WARNING, logger="mathquest.presentation.api"):
            assert parse_optional_id(raw, "roleId") is None

        assert "Could not convert roleId=" in caplog.text

    def test_absent_markers_do_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mathquest.presentation.api"):
            parse_optional_id("undefined", "roleId")

        assert caplog.records == []
