import pytest

from core.errors import ErrorCode
from core.validation import (
    EmailFormat,
    EnumConstraint,
    MonthFormat,
    NumericParams,
    RequestContext,
    RequiredFields,
    TypeMap,
    TypeTag,
    is_integer,
    parse_positive_int,
    resolve_path,
    sanitize_string,
    type_tag_of,
)


def body(**fields) -> RequestContext:
    return RequestContext(body=fields)


def message(result) -> str:
    assert result.is_err()
    return result.unwrap_err().message


class TestRequiredFields:
    def test_passes_when_all_present(self):
        result = RequiredFields(["clientId", "contactId"]).check(body(clientId=1, contactId=2))
        assert result.is_ok()
        assert dict(result.unwrap()) == {}

    def test_missing_field_is_reported(self):
        result = RequiredFields(["clientId", "contactId"]).check(body(clientId=1))
        error = result.unwrap_err()
        assert "contactId" in error.message
        assert "clientId" not in error.message
        assert error.code is ErrorCode.E2001_REQUIRED_FIELD_MISSING
        assert error.http_status == 400
        assert error.error_type == "ValidationError"

    def test_every_missing_field_is_listed(self):
        result = RequiredFields(["a", "b", "c"]).check(body(b=1))
        assert message(result) == "Missing required fields: a, c"

    @pytest.mark.parametrize("value", [None, ""])
    def test_null_and_empty_string_count_as_missing(self, value):
        assert RequiredFields(["name"]).check(body(name=value)).is_err()

    @pytest.mark.parametrize("value", [0, False, [], {}, " "])
    def test_falsy_values_other_than_empty_string_are_present(self, value):
        assert RequiredFields(["name"]).check(body(name=value)).is_ok()

    def test_nested_field_present(self):
        result = RequiredFields(["timeEntry.duration"]).check(body(timeEntry={"duration": "2h"}))
        assert result.is_ok()

    def test_nested_field_missing(self):
        result = RequiredFields(["timeEntry.duration"]).check(body(timeEntry={}))
        assert "timeEntry.duration" in message(result)

    def test_missing_intermediate_level_does_not_raise(self):
        result = RequiredFields(["timeEntry.duration"]).check(body())
        assert "timeEntry.duration" in message(result)

    def test_non_mapping_intermediate_level_is_missing(self):
        result = RequiredFields(["timeEntry.duration"]).check(body(timeEntry="2h"))
        assert "timeEntry.duration" in message(result)

    def test_fields_are_frozen(self):
        fields = ["clientId"]
        checker = RequiredFields(fields)
        fields.append("contactId")
        assert checker.fields == ("clientId",)

    def test_same_outcome_on_repeated_runs(self):
        checker = RequiredFields(["clientId", "contactId"])
        ctx = body(clientId=1)
        first, second = checker.check(ctx), checker.check(ctx)
        assert message(first) == message(second)
        assert first.unwrap_err().code is second.unwrap_err().code
        assert dict(ctx.body) == {"clientId": 1}


class TestResolvePath:
    def test_walks_nested_mappings(self):
        assert resolve_path({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_present_null_is_returned_as_none(self):
        assert resolve_path({"a": None}, "a") is None


class TestTypeMap:
    def test_matching_types_pass(self):
        result = TypeMap({"clientId": "number", "description": "string"}).check(
            body(clientId=1, description="Test")
        )
        assert result.is_ok()

    def test_absent_fields_are_skipped(self):
        assert TypeMap({"clientId": "number", "tags": "array"}).check(body()).is_ok()

    def test_mismatch_names_expected_and_actual(self):
        result = TypeMap({"clientId": "number"}).check(body(clientId="1"))
        assert message(result) == "clientId must be a number, got string"
        assert result.unwrap_err().code is ErrorCode.E2004_INVALID_TYPE

    def test_fractional_value_is_not_an_integer(self):
        result = TypeMap({"clientId": "integer"}).check(body(clientId=1.5))
        assert message(result) == "clientId must be an integer"

    @pytest.mark.parametrize("value", [3, 3.0, -2, 0])
    def test_integer_accepts_whole_numbers(self, value):
        assert TypeMap({"n": "integer"}).check(body(n=value)).is_ok()

    @pytest.mark.parametrize("value", [True, "3", None, float("nan"), float("inf")])
    def test_integer_rejects_non_numbers(self, value):
        assert message(TypeMap({"n": "integer"}).check(body(n=value))) == "n must be an integer"

    def test_array(self):
        checker = TypeMap({"tags": "array"})
        assert checker.check(body(tags=["a"])).is_ok()
        assert message(checker.check(body(tags="a"))) == "tags must be an array"

    def test_boolean_is_not_a_number(self):
        result = TypeMap({"count": "number"}).check(body(count=True))
        assert message(result) == "count must be a number, got boolean"

    def test_array_is_not_an_object(self):
        result = TypeMap({"meta": "object"}).check(body(meta=[]))
        assert message(result) == "meta must be a object, got array"

    def test_null_reports_null(self):
        result = TypeMap({"name": "string"}).check(body(name=None))
        assert message(result) == "name must be a string, got null"

    def test_all_errors_joined(self):
        result = TypeMap({"a": "string", "b": "integer", "c": "boolean"}).check(
            body(a=1, b=2.5, c=True)
        )
        assert message(result) == "a must be a string, got number; b must be an integer"

    def test_unknown_tag_rejected_at_construction(self):
        with pytest.raises(ValueError):
            TypeMap({"when": "date"})

    def test_tags_normalised(self):
        assert TypeMap({"a": "array"}).types["a"] is TypeTag.ARRAY


class TestTypeTags:
    @pytest.mark.parametrize("value,tag", [
        ("x", "string"),
        (1, "number"),
        (1.5, "number"),
        (False, "boolean"),
        ({}, "object"),
        ([], "array"),
        (None, "null"),
    ])
    def test_type_tag_of(self, value, tag):
        assert type_tag_of(value) == tag

    def test_is_integer(self):
        assert is_integer(4.0)
        assert not is_integer(4.5)
        assert not is_integer(False)


class TestEnumConstraint:
    checker = EnumConstraint("state", ["open", "closed"])

    def test_allowed_value_in_query(self):
        assert self.checker.check(RequestContext(query={"state": "open"})).is_ok()

    def test_disallowed_value_lists_options(self):
        result = self.checker.check(RequestContext(query={"state": "pending"}))
        assert message(result) == "state must be one of: open, closed"
        assert result.unwrap_err().http_status == 400

    def test_absent_from_both_sources_passes(self):
        assert self.checker.check(RequestContext()).is_ok()

    def test_body_takes_precedence_over_query(self):
        ctx = RequestContext(body={"state": "open"}, query={"state": "bogus"})
        assert self.checker.check(ctx).is_ok()

    def test_disallowed_body_value(self):
        ctx = RequestContext(body={"state": "pending"}, query={"state": "open"})
        assert self.checker.check(ctx).is_err()

    def test_null_body_value_falls_back_to_query(self):
        ctx = RequestContext(body={"state": None}, query={"state": "pending"})
        assert self.checker.check(ctx).is_err()

    def test_membership_is_case_sensitive(self):
        assert self.checker.check(RequestContext(body={"state": "Open"})).is_err()

    def test_membership_is_type_exact(self):
        checker = EnumConstraint("priority", [1, 2, 3])
        assert checker.check(body(priority=2)).is_ok()
        assert checker.check(body(priority=True)).is_err()


class TestNumericParams:
    def test_positive_integer_passes(self):
        assert NumericParams(["id"]).check(RequestContext(params={"id": "123"})).is_ok()

    @pytest.mark.parametrize("value", ["0", "-5", "1.5", "abc", "", " 1", "+1", "5\n", "٥"])
    def test_invalid_values_fail(self, value):
        result = NumericParams(["id"]).check(RequestContext(params={"id": value}))
        assert message(result) == "id must be a positive integer"

    def test_leading_zeros_allowed(self):
        assert NumericParams(["id"]).check(RequestContext(params={"id": "007"})).is_ok()

    def test_absent_params_skipped(self):
        assert NumericParams(["id", "noteId"]).check(RequestContext(params={"id": "4"})).is_ok()

    def test_failures_aggregated(self):
        ctx = RequestContext(params={"id": "x", "noteId": "0", "other": "5"})
        result = NumericParams(["id", "noteId", "other"]).check(ctx)
        assert message(result) == "id must be a positive integer; noteId must be a positive integer"


@pytest.mark.parametrize("value,expected", [
    ("42", 42),
    (42, 42),
    ("0", None),
    (0, None),
    (-3, None),
    (True, None),
    (2.0, 2),
    (2.5, None),
    (0.0, None),
    (float("inf"), None),
    ("7\n", None),
    ("4e2", None),
    (None, None),
])
def test_parse_positive_int(value, expected):
    assert parse_positive_int(value) == expected


class TestMonthFormat:
    @pytest.mark.parametrize("month", ["2025-10", "1999-01", "2030-12"])
    def test_valid_months(self, month):
        assert MonthFormat().check(RequestContext(query={"month": month})).is_ok()

    @pytest.mark.parametrize("month", ["2025-13", "2025-00", "25-10", "2025-1", "October", "", "2025-10\n", "0000-05"])
    def test_invalid_months(self, month):
        result = MonthFormat().check(RequestContext(query={"month": month}))
        assert message(result) == "month must be in YYYY-MM format"

    def test_absent_month_passes(self):
        assert MonthFormat().check(RequestContext()).is_ok()


class TestEmailFormat:
    def test_valid(self):
        assert EmailFormat().check(body(email="alice@acme.test")).is_ok()

    @pytest.mark.parametrize("value", ["not-an-email", "a@b", "a b@c.d", "alice@acme.test\n", 42])
    def test_invalid(self, value):
        result = EmailFormat().check(body(email=value))
        assert message(result) == "email must be a valid email address"
        assert result.unwrap_err().code is ErrorCode.E2010_INVALID_EMAIL

    def test_absent_or_empty_passes(self):
        assert EmailFormat().check(body()).is_ok()
        assert EmailFormat().check(body(email="")).is_ok()


class TestSanitizeString:
    def test_trims(self):
        assert sanitize_string("  hello  ") == "hello"

    def test_truncates(self):
        assert sanitize_string("abcdef", max_length=3) == "abc"

    def test_non_string_becomes_empty(self):
        assert sanitize_string(None) == ""
        assert sanitize_string(12) == ""
