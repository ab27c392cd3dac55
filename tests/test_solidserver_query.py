"""Tests for WHERE clause assembly."""

import pytest

from solidserver_ipam.server.solidserver_query import WhereClause, quote


class TestQuote:

    def test_wraps_in_single_quotes(self):
        assert quote("42") == "'42'"
        assert quote(7) == "'7'"

    def test_doubles_embedded_quotes(self):
        assert quote("o'brien") == "'o''brien'"


class TestWhereClause:
    """Tests for WhereClause."""

    def test_empty_clause(self):
        where = WhereClause()
        assert not where
        assert str(where) == ""

    def test_terms_joined_with_and(self):
        where = (WhereClause()
                 .compare_fields("free_start_ip_addr", "!=", "free_end_ip_addr")
                 .equals("subnet_id", "42"))
        assert where
        assert str(where) == "free_start_ip_addr != free_end_ip_addr AND subnet_id='42'"

    def test_lower_cases_values_on_request(self):
        where = WhereClause().equals("vlmdomain_name", "DC-Paris", lower=True)
        assert str(where) == "vlmdomain_name='dc-paris'"

    def test_value_cannot_escape_quotes(self):
        where = WhereClause().equals("site_name", "x' OR '1'='1")
        assert str(where) == "site_name='x'' OR ''1''=''1'"

    def test_compare_operator(self):
        where = WhereClause().compare("subnet_level", ">=", 2)
        assert str(where) == "subnet_level>='2'"

    @pytest.mark.parametrize("field", ["", "Site", "1site", "site name", "site;drop", "site_id\n"])
    def test_rejects_invalid_field(self, field):
        with pytest.raises(ValueError):
            WhereClause().equals(field, "x")

    def test_rejects_invalid_operator(self):
        with pytest.raises(ValueError):
            WhereClause().compare("site_id", "LIKE", "x")
        with pytest.raises(ValueError):
            WhereClause().compare_fields("a", "OR", "b")
