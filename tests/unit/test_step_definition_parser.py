"""Parsing step JSON: strict on save, lenient on stored rows."""

import pytest

from app.application.services.condition_evaluator import evaluate_conditions
from app.application.services.step_definition_parser import (
    ALLOW_LIST_REQUIRED_MESSAGE,
    build_allow_list,
    parse_actions,
    parse_allow_list,
    parse_conditions,
)
from app.domain.entities.workflow import DomainCondition, EmailCondition
from app.domain.enums import ConditionLogic
from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import VisitorIdentity

TARGET = "clink0000000000000000001"


class TestParseConditions:
    def test_parses_and_normalizes_items(self) -> None:
        result = parse_conditions(
            {
                "logic": "and",
                "items": [
                    {"type": "email", "operator": "in_list", "value": [" Jane@Acme.com ", "jane@acme.com"]},
                    {"type": "DOMAIN", "operator": "in_list", "value": "@Acme.com"},
                ],
            }
        )
        assert result.logic is ConditionLogic.AND
        assert result.items == (
            EmailCondition(values=("jane@acme.com",)),
            DomainCondition(values=("acme.com",)),
        )

    def test_missing_logic_defaults_to_or(self) -> None:
        result = parse_conditions(
            {"items": [{"type": "domain", "operator": "in_list", "value": ["acme.com"]}]}
        )
        assert result.logic is ConditionLogic.OR

    def test_missing_operator_defaults_to_in_list(self) -> None:
        result = parse_conditions({"items": [{"type": "domain", "value": ["acme.com"]}]})
        assert result.items == (DomainCondition(values=("acme.com",)),)

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            [],
            {"logic": "XOR", "items": [{"type": "email", "value": ["a@b.com"]}]},
            {"logic": "OR"},
            {"logic": "OR", "items": []},
            {"logic": "OR", "items": [{"type": "ip", "value": ["1.2.3.4"]}]},
            {"logic": "OR", "items": [{"type": "email", "operator": "contains", "value": ["a@b.com"]}]},
            {"logic": "OR", "items": [{"type": "email", "value": []}]},
            {"logic": "OR", "items": [{"type": "email", "value": ["not-an-email"]}]},
            {"logic": "OR", "items": ["email"]},
        ],
    )
    def test_strict_rejects_malformed(self, raw) -> None:
        with pytest.raises(ValidationException) as exc_info:
            parse_conditions(raw, strict=True)
        assert exc_info.value.details == {"field": "conditions"}

    def test_lenient_drops_malformed_items(self) -> None:
        result = parse_conditions(
            {
                "logic": "OR",
                "items": [
                    {"type": "ip", "value": ["1.2.3.4"]},
                    {"type": "email", "value": ["bad", "ok@acme.com"]},
                ],
            },
            strict=False,
        )
        assert result.items == (EmailCondition(values=("ok@acme.com",)),)

    @pytest.mark.parametrize(
        "bad_item",
        [
            {"type": "email", "value": ["not-an-email"]},
            {"type": "ip", "value": ["1.2.3.4"]},
            "domain",
        ],
    )
    def test_lenient_and_with_malformed_item_yields_empty_set(self, bad_item) -> None:
        result = parse_conditions(
            {
                "logic": "AND",
                "items": [bad_item, {"type": "domain", "value": ["acme.com"]}],
            },
            strict=False,
        )
        assert result.is_empty
        assert not evaluate_conditions(result, VisitorIdentity.from_email("mallory@acme.com"))

    def test_lenient_and_keeps_well_formed_set(self) -> None:
        result = parse_conditions(
            {
                "logic": "AND",
                "items": [
                    {"type": "email", "value": ["bad", "jane@acme.com"]},
                    {"type": "domain", "value": ["acme.com"]},
                ],
            },
            strict=False,
        )
        assert result.items == (
            EmailCondition(values=("jane@acme.com",)),
            DomainCondition(values=("acme.com",)),
        )

    def test_lenient_invalid_logic_yields_empty_set(self) -> None:
        result = parse_conditions(
            {"logic": "XOR", "items": [{"type": "email", "value": ["a@b.com"]}]},
            strict=False,
        )
        assert result.is_empty

    def test_lenient_non_object_yields_empty_set(self) -> None:
        assert parse_conditions("garbage", strict=False).is_empty
        assert parse_conditions({"logic": "OR", "items": "x"}, strict=False).is_empty


class TestParseActions:
    def test_single_route_action(self) -> None:
        action = parse_actions([{"type": "route", "target_link_id": TARGET}])
        assert action is not None
        assert action.target_link_id == TARGET

    def test_accepts_camel_case_target(self) -> None:
        action = parse_actions(
            [{"type": "route", "targetLinkId": TARGET, "targetDocumentId": "cdoc12345678"}]
        )
        assert action is not None
        assert action.target_link_id == TARGET
        assert action.target_document_id == "cdoc12345678"

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            [],
            [{"type": "route", "target_link_id": TARGET}, {"type": "route", "target_link_id": TARGET}],
            [{"type": "notify", "target_link_id": TARGET}],
            [{"type": "route"}],
            [{"type": "route", "target_link_id": "../../etc"}],
        ],
    )
    def test_strict_requires_exactly_one_valid_route(self, raw) -> None:
        with pytest.raises(ValidationException) as exc_info:
            parse_actions(raw, strict=True)
        assert exc_info.value.details == {"field": "actions"}

    def test_lenient_uses_first_action_only(self) -> None:
        action = parse_actions(
            [{"type": "route", "target_link_id": TARGET}, {"type": "notify"}], strict=False
        )
        assert action is not None and action.target_link_id == TARGET
        assert (
            parse_actions(
                [{"type": "notify"}, {"type": "route", "target_link_id": TARGET}], strict=False
            )
            is None
        )
        assert parse_actions([], strict=False) is None
        assert parse_actions([{"type": "route", "target_link_id": ""}], strict=False) is None
        assert parse_actions({"type": "route"}, strict=False) is None


class TestAllowList:
    def test_splits_emails_and_domains(self) -> None:
        result = parse_allow_list(["Jane@Acme.com", "", "  @Partner.io ", "jane@acme.com"])
        assert result.logic is ConditionLogic.OR
        assert result.items == (
            EmailCondition(values=("jane@acme.com",)),
            DomainCondition(values=("partner.io",)),
        )

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationException, match=ALLOW_LIST_REQUIRED_MESSAGE):
            parse_allow_list(["", "   "])

    def test_malformed_entry_rejected(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            parse_allow_list(["jane"])
        assert exc_info.value.details == {"field": "allow_list"}

    def test_build_allow_list_prefixes_domains(self) -> None:
        conds = parse_allow_list(["jane@acme.com", "@partner.io"])
        assert build_allow_list(conds) == ["jane@acme.com", "@partner.io"]
