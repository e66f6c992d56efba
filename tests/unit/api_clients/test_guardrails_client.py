"""Tests for the guardrails service."""

import json

import pytest

from firefly_client.api_clients import (
    CreateGuardrailResponse,
    GuardrailCriteria,
    GuardrailRule,
    GuardrailScope,
    GuardrailType,
    guardrail_severity_to_int,
    guardrail_severity_to_string,
)
from firefly_client.api_clients.guardrails_client import (
    CostCriteria,
    IncludeExcludeWildcard,
)
from firefly_client.exceptions import DecodingError, NotFoundError

SEARCH_PATH = "/v2/guardrails/search"


@pytest.fixture
def cost_rule():
    return GuardrailRule(
        name="Monthly cost cap",
        type=GuardrailType.COST,
        scope=GuardrailScope(workspaces=IncludeExcludeWildcard(include=["*"])),
        criteria=GuardrailCriteria(cost=CostCriteria(threshold_amount=500.0)),
        is_enabled=True,
        severity=2,
    )


class TestGuardrailCreate:
    """Test both response forms of guardrail creation."""

    def test_create_with_bare_string_response(self, api_client, control_plane, cost_rule):
        control_plane.add_json("POST", "/v2/guardrails", "rule-xyz")

        response = api_client.guardrails.create(cost_rule)

        assert response.rule_id == "rule-xyz"
        assert response.notification_id == ""

    def test_create_with_object_response(self, api_client, control_plane, cost_rule):
        control_plane.add_json(
            "POST", "/v2/guardrails", {"ruleId": "rule-xyz", "notificationId": "n-1"}
        )

        response = api_client.guardrails.create(cost_rule)

        assert response == CreateGuardrailResponse(rule_id="rule-xyz", notification_id="n-1")

    def test_create_with_null_notification_id(self, api_client, control_plane, cost_rule):
        control_plane.add_json(
            "POST", "/v2/guardrails", {"ruleId": "rule-xyz", "notificationId": None}
        )

        response = api_client.guardrails.create(cost_rule)

        assert response == CreateGuardrailResponse(rule_id="rule-xyz", notification_id="")

    def test_create_request_body(self, api_client, control_plane, cost_rule):
        control_plane.add_json("POST", "/v2/guardrails", "rule-xyz")

        api_client.guardrails.create(cost_rule)

        assert json.loads(control_plane.api_requests[0].content) == {
            "name": "Monthly cost cap",
            "type": "cost",
            "scope": {"workspaces": {"include": ["*"]}},
            "criteria": {"cost": {"thresholdAmount": 500.0}},
            "isEnabled": True,
            "severity": 2,
        }

    def test_create_with_unexpected_response(self, api_client, control_plane, cost_rule):
        control_plane.add_json("POST", "/v2/guardrails", 12345)

        with pytest.raises(DecodingError):
            api_client.guardrails.create(cost_rule)


class TestGuardrailLookup:
    """Test search and the list-based get."""

    RULES = [
        {"id": "r1", "name": "one", "type": "tag", "isEnabled": True, "severity": 1},
        {"id": "r2", "name": "two", "type": "policy", "isEnabled": False, "severity": 3},
    ]

    def test_list_uses_first_page_by_default(self, api_client, control_plane):
        control_plane.add_json("POST", SEARCH_PATH, self.RULES)

        rules = api_client.guardrails.list()

        assert [r.id for r in rules] == ["r1", "r2"]
        assert control_plane.api_requests[0].url.query == b"page=0&pageSize=100"

    def test_get_scans_list(self, api_client, control_plane):
        control_plane.add_json("POST", SEARCH_PATH, self.RULES)

        rule = api_client.guardrails.get("r2")

        assert rule.type == GuardrailType.POLICY
        assert rule.is_enabled is False

    def test_get_missing_rule(self, api_client, control_plane):
        control_plane.add_json("POST", SEARCH_PATH, self.RULES)

        with pytest.raises(NotFoundError, match="r3"):
            api_client.guardrails.get("r3")

    def test_get_on_empty_list(self, api_client, control_plane):
        control_plane.add_json("POST", SEARCH_PATH, [])

        with pytest.raises(NotFoundError):
            api_client.guardrails.get("r1")


class TestGuardrailUpdateDelete:
    """Test guardrail update and deletion."""

    def test_update_uses_patch(self, api_client, control_plane, cost_rule):
        control_plane.add_json(
            "PATCH",
            "/v2/guardrails/r1",
            {"id": "r1", "name": "Monthly cost cap", "enabled": True, "updatedAt": "2026-01-01"},
        )

        response = api_client.guardrails.update("r1", cost_rule)

        assert response.enabled is True
        assert response.updated_at == "2026-01-01"

    def test_delete(self, api_client, control_plane):
        control_plane.add_json("DELETE", "/v2/guardrails/r1", {"status": 200, "message": "ok"})

        response = api_client.guardrails.delete("r1")

        assert response.message == "ok"


class TestGuardrailSeverity:
    """Test conversion between guardrail severity names and numbers."""

    @pytest.mark.parametrize("name,value", [("Flexible", 1), ("Strict", 2), ("Warning", 3)])
    def test_known_severities(self, name, value):
        assert guardrail_severity_to_string(value) == name
        assert guardrail_severity_to_int(name) == value

    def test_unknown_severity(self):
        assert guardrail_severity_to_string(7) == "Unknown"
        assert guardrail_severity_to_int("Critical") == 0
