"""Tests for the workspaces service."""

import json

import pytest

from firefly_client.api_clients import ListWorkspaceRunsRequest, ListWorkspacesRequest
from firefly_client.api_clients.workspaces_client import WorkspaceFilters, WorkspaceRunFilters
from firefly_client.exceptions import NotFoundError

SEARCH_PATH = "/v2/workspaces/search"


class TestWorkspacesService:
    """Test workspace search, labels, deletion and runs."""

    def test_list_with_defaults(self, api_client, control_plane):
        control_plane.add_json(
            "POST",
            SEARCH_PATH,
            [{"id": "w1", "workspaceName": "net", "labels": "prod", "runsCount": 3}],
        )

        workspaces = api_client.workspaces.list()

        request = control_plane.api_requests[0]
        assert request.url.query == b"page=0&pageSize=100"
        assert json.loads(request.content) == {}
        assert workspaces[0].labels == ["prod"]
        assert workspaces[0].runs_count == 3

    def test_list_with_filters(self, api_client, control_plane):
        control_plane.add_json("POST", SEARCH_PATH, [])

        api_client.workspaces.list(
            ListWorkspacesRequest(
                filters=WorkspaceFilters(labels=["prod"], is_managed_workflow=True),
                search_value="net",
            ),
            page=2,
            page_size=25,
        )

        request = control_plane.api_requests[0]
        assert request.url.query == b"page=2&pageSize=25"
        assert json.loads(request.content) == {
            "filters": {"labels": ["prod"], "isManagedWorkflow": True},
            "searchValue": "net",
        }

    def test_get_scans_first_page(self, api_client, control_plane):
        control_plane.add_json(
            "POST",
            SEARCH_PATH,
            [{"id": "w1", "workspaceName": "a"}, {"id": "w2", "workspaceName": "b"}],
        )

        workspace = api_client.workspaces.get("w2")

        assert workspace.workspace_name == "b"
        assert len(control_plane.api_requests) == 1

    def test_get_missing_workspace(self, api_client, control_plane):
        control_plane.add_json("POST", SEARCH_PATH, [{"id": "w1"}])

        with pytest.raises(NotFoundError, match="w9"):
            api_client.workspaces.get("w9")

    def test_update_labels(self, api_client, control_plane):
        control_plane.add_json(
            "PUT",
            "/v2/workspaces/w1/labels",
            {"id": "w1", "workspaceName": "net", "labels": ["a", "b"], "updatedAt": "now"},
        )

        result = api_client.workspaces.update_labels("w1", ["a", "b"])

        assert result.labels == ["a", "b"]
        assert json.loads(control_plane.api_requests[0].content) == {"labels": ["a", "b"]}

    def test_update_labels_to_empty_still_sends_list(self, api_client, control_plane):
        control_plane.add_json("PUT", "/v2/workspaces/w1/labels", {"id": "w1", "labels": []})

        api_client.workspaces.update_labels("w1", [])

        assert json.loads(control_plane.api_requests[0].content) == {"labels": []}

    def test_delete_workspace(self, api_client, control_plane):
        control_plane.add_json(
            "DELETE", "/v2/workspaces/w1", {"status": 200, "data": {"message": "deleted"}}
        )

        result = api_client.workspaces.delete("w1")

        assert result.status == 200
        assert result.data.message == "deleted"

    def test_list_runs(self, api_client, control_plane):
        control_plane.add_json(
            "POST",
            "/v2/workspaces/w1/runs/search",
            [{"runId": "r1", "status": "applied"}],
        )

        runs = api_client.workspaces.list_runs(
            "w1", ListWorkspaceRunsRequest(filters=WorkspaceRunFilters(status=["applied"]))
        )

        assert runs[0].run_id == "r1"
        assert json.loads(control_plane.api_requests[0].content) == {
            "filters": {"status": ["applied"]}
        }
