"""Tests for GraphQL response envelope contracts."""

from contractguard.validators import (
    ViolationCode,
    graphql_envelope,
    null_payload_envelope,
    of_type,
    rejected_envelope,
    required,
    rule_set,
    validate,
)

CATEGORY_PAYLOAD = {
    "name": rule_set(required(), of_type("string")),
    "photo": rule_set(of_type("string")),
}


class TestGraphqlEnvelope:
    def test_success_payload(self) -> None:
        contract = graphql_envelope("addCategory", CATEGORY_PAYLOAD)
        assert validate(contract, {"data": {"addCategory": {"name": "Shoes", "photo": "x.jpg"}}}).is_valid

    def test_scalar_payload(self) -> None:
        contract = graphql_envelope("price", rule_set(required(), of_type("number")))
        result = validate(contract, {"data": {"price": "12"}})
        assert [v.location for v in result.violations] == ["data.price"]

    def test_null_payload_fails_success_contract(self) -> None:
        contract = graphql_envelope("addCategory", CATEGORY_PAYLOAD)
        result = validate(contract, {"data": {"addCategory": None}})
        assert result.violations[0].code == ViolationCode.SHAPE_MISMATCH


class TestFailureVariants:
    def test_null_payload_variant(self) -> None:
        contract = null_payload_envelope("addProduct")
        assert validate(contract, {"data": {"addProduct": None}}).is_valid
        assert not validate(contract, {"data": {"addProduct": {"name": "x"}}}).is_valid

    def test_null_payload_variant_requires_the_key(self) -> None:
        result = validate(null_payload_envelope("addProduct"), {"data": {}})
        assert result.violations[0].code == ViolationCode.REQUIRED_MISSING

    def test_rejection_variant(self) -> None:
        body = {"errors": [{"message": "Unauthorized", "extensions": {"code": "UNAUTHENTICATED"}}], "data": None}
        assert validate(rejected_envelope(), body).is_valid

    def test_rejection_without_data_key(self) -> None:
        assert validate(rejected_envelope(), {"errors": [{"message": "Bad request"}]}).is_valid

    def test_rejection_needs_at_least_one_error(self) -> None:
        result = validate(rejected_envelope(), {"errors": []})
        assert [v.code for v in result.violations] == [ViolationCode.TOO_FEW_ITEMS]
