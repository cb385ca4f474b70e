"""Unit tests for placeholder normalization."""

from __future__ import annotations

from daas_db.core.params import normalize_params


class TestNormalizeParams:
    def test_named_passthrough(self) -> None:
        sql = "SELECT * FROM bots WHERE id = :w0"
        assert normalize_params(sql, "named") == sql

    def test_pyformat(self) -> None:
        sql = "SELECT * FROM bots WHERE id = :w0 AND status = :w1"
        assert normalize_params(sql, "pyformat") == (
            "SELECT * FROM bots WHERE id = %(w0)s AND status = %(w1)s"
        )

    def test_limit_and_offset(self) -> None:
        assert normalize_params("SELECT id FROM bots LIMIT :limit OFFSET :offset", "pyformat") == (
            "SELECT id FROM bots LIMIT %(limit)s OFFSET %(offset)s"
        )

    def test_typecast_untouched(self) -> None:
        sql = "SELECT :v0::text"
        assert normalize_params(sql, "pyformat") == "SELECT %(v0)s::text"

    def test_string_literal_untouched(self) -> None:
        sql = "SELECT ':not_a_param' AS label, :v0 AS value"
        assert normalize_params(sql, "pyformat") == (
            "SELECT ':not_a_param' AS label, %(v0)s AS value"
        )

    def test_no_placeholders(self) -> None:
        assert normalize_params("SELECT 1", "pyformat") == "SELECT 1"
