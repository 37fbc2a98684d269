from __future__ import annotations

import pytest

from modules.gateway.parser import OperationSyntaxError, parse_operation, tokenize

pytestmark = pytest.mark.unit


class TestTokenize:
    def test_skips_comments_and_commas(self):
        tokens = tokenize("# deleteShipment\n{ a, b }")
        assert [t.value for t in tokens] == ["{", "a", "b", "}"]

    def test_strings_are_single_tokens(self):
        tokens = tokenize('{ a(x: "deleteShipment { }") }')
        assert [t.kind for t in tokens] == [
            "punct", "name", "punct", "name", "punct", "string", "punct", "punct",
        ]

    def test_block_string(self):
        tokens = tokenize('"""multi\nline "quoted" text"""')
        assert len(tokens) == 1
        assert tokens[0].kind == "block_string"

    def test_rejects_unknown_character(self):
        with pytest.raises(OperationSyntaxError):
            tokenize("{ a ; b }")


class TestParseOperation:
    def test_named_query_with_variables(self):
        parsed = parse_operation(
            """
            query GetShipments($filter: ShipmentFilterInput, $page: Int = 1) {
              shipments(filter: $filter, page: $page) {
                edges { id trackingNumber }
                pageInfo { totalCount }
              }
            }
            """
        )
        assert parsed.operation_type == "query"
        assert parsed.name == "GetShipments"
        assert parsed.field == "shipments"

    def test_anonymous_shorthand(self):
        parsed = parse_operation("{ me { id } }")
        assert parsed.operation_type == "query"
        assert parsed.name is None
        assert parsed.field == "me"

    def test_mutation(self):
        parsed = parse_operation(
            "mutation DeleteShipment($id: ID!) { deleteShipment(id: $id) }"
        )
        assert parsed.operation_type == "mutation"
        assert parsed.field == "deleteShipment"

    def test_alias_is_ignored(self):
        parsed = parse_operation("query { list: shipments { edges { id } } }")
        assert parsed.field == "shipments"
        assert parsed.alias == "list"

    def test_directives_are_skipped(self):
        parsed = parse_operation("query Q @cached(ttl: 5) { shipment(id: $id) @skip(if: false) { id } }")
        assert parsed.field == "shipment"

    def test_keywords_in_comments_do_not_count(self):
        parsed = parse_operation(
            """
            # deleteShipment createShipment
            query { shipments { edges { id } } }
            """
        )
        assert parsed.field == "shipments"

    def test_keywords_in_strings_do_not_count(self):
        parsed = parse_operation(
            'query { shipments(filter: {search: "deleteShipment"}) { edges { id } } }'
        )
        assert parsed.field == "shipments"

    def test_nested_field_names_do_not_count(self):
        parsed = parse_operation("query { shipment(id: $id) { deleteShipment } }")
        assert parsed.field == "shipment"

    @pytest.mark.parametrize(
        "document",
        [
            "",
            "   # only a comment",
            "query",
            "query { }",
            "query { shipments me }",
            "query { shipments } query { me }",
            "query { shipments } mutation { deleteShipment }",
            "subscription { shipments }",
            "fragment F on Shipment { id }",
            "query { ...F }",
            "query { shipments(filter: {) }",
            "query { shipments { edges { id } }",
            "shipments",
        ],
    )
    def test_rejects(self, document):
        with pytest.raises(OperationSyntaxError):
            parse_operation(document)
