"""Tests for the exception hierarchy."""

from querywrap import (
    ConnectionError,
    ConversionError,
    QueryError,
    QuerywrapError,
    RecordNotFoundError,
    UnsupportedOperationError,
    ValidationError,
)


class TestExceptions:
    """Tests for exception messages and context."""

    def test_all_share_base(self):
        for error in (
            ConnectionError("x"),
            ConversionError("f", "C", "raw", "int"),
            QueryError("x"),
            RecordNotFoundError("t", "id", "1"),
            UnsupportedOperationError("join", "solr"),
            ValidationError("x"),
        ):
            assert isinstance(error, QuerywrapError)

    def test_to_dict(self):
        error = QueryError("Query failed: boom", "SELECT 1")
        assert error.to_dict() == {
            "error": "QueryError",
            "message": "Query failed: boom",
            "context": {"query": "SELECT 1"},
        }

    def test_query_error_without_query(self):
        assert QueryError("x").context == {}

    def test_record_not_found(self):
        error = RecordNotFoundError("bugs", "INTERNAL_ID", "99", "SELECT ...")
        assert str(error) == "No record in 'bugs' where INTERNAL_ID = '99'."
        assert isinstance(error, LookupError)
        assert isinstance(error, QueryError)
        assert error.context == {
            "query": "SELECT ...",
            "table": "bugs",
            "field": "INTERNAL_ID",
            "value": "99",
        }

    def test_unsupported_operation(self):
        error = UnsupportedOperationError("group_by", "solr")
        assert isinstance(error, NotImplementedError)
        assert "'group_by' is not supported by the solr backend" in str(error)

    def test_conversion_error(self):
        error = ConversionError("id", "INTERNAL_ID", "abc", "int")
        assert "INTERNAL_ID" in error.message
        assert error.context["raw"] == "abc"

    def test_connection_error_dsns(self):
        assert ConnectionError("down").dsns == []
        assert ConnectionError("down", ["sqlite://"]).context == {"dsns": ["sqlite://"]}

    def test_validation_error_fields(self):
        error = ValidationError("bad payload", {"id": "missing"})
        assert error.field_errors == {"id": "missing"}
