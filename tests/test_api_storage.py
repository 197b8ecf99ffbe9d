"""Tests for ApiStorage with a mocked requests session."""

import pytest
from unittest.mock import MagicMock

import requests

from mlotasks.errors import InvalidFormatError, NotFoundError, StorageError
from mlotasks.storage.api import ApiRequestError, ApiStorage


BASE_URL = "http://api.test/api"


def make_response(status_code=200, json_body=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 300
    if json_body is None:
        response.headers = {}
        response.content = b""
    else:
        response.headers = {"content-type": "application/json"}
        response.content = b"{}"
        response.json.return_value = json_body
    return response


@pytest.fixture
def session():
    mock_session = MagicMock(spec=requests.Session)
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def api(session):
    return ApiStorage(base_url=BASE_URL + "/", token="secret", timeout=5, session=session)


class TestApiStorageRequests:
    def test_headers(self, api, session):
        assert session.headers["Authorization"] == "Bearer secret"
        assert session.headers["Content-Type"] == "application/json"

    def test_no_token_no_authorization_header(self, session):
        ApiStorage(base_url=BASE_URL, token="", session=session)
        assert "Authorization" not in session.headers

    def test_get_tasks(self, api, session):
        session.request.return_value = make_response(json_body=[{"id": "task_1"}])

        assert api.get_tasks() == [{"id": "task_1"}]
        session.request.assert_called_once_with("GET", f"{BASE_URL}/tasks", json=None, timeout=5)

    def test_save_tasks_wraps_collection(self, api, session):
        session.request.return_value = make_response(status_code=204)

        api.save_tasks([{"id": "task_1"}])

        session.request.assert_called_once_with(
            "PUT", f"{BASE_URL}/tasks", json={"tasks": [{"id": "task_1"}]}, timeout=5
        )

    def test_save_contexts_and_views_wrap_collection(self, api, session):
        session.request.return_value = make_response(status_code=204)

        api.save_contexts([])
        api.save_views([{"id": "view_1"}])

        calls = session.request.call_args_list
        assert calls[0].kwargs["json"] == {"contexts": []}
        assert calls[1].kwargs["json"] == {"views": [{"id": "view_1"}]}

    def test_empty_bodies_coerce_to_defaults(self, api, session):
        session.request.return_value = make_response(status_code=200)

        assert api.get_tasks() == []
        assert api.get_contexts() == []
        assert api.get_views() == []
        assert api.get_settings() == {}

    def test_endpoints(self, api, session):
        session.request.return_value = make_response(json_body={"id": "task_1"})

        api.update_task("task_1", {"title": "x"})
        api.delete_task("task_1")
        api.clear_all()
        api.export_data()

        called = [(c.args[0], c.args[1]) for c in session.request.call_args_list]
        assert called == [
            ("PATCH", f"{BASE_URL}/tasks/task_1"),
            ("DELETE", f"{BASE_URL}/tasks/task_1"),
            ("DELETE", f"{BASE_URL}/data"),
            ("GET", f"{BASE_URL}/export"),
        ]


class TestApiStorageErrors:
    def test_non_2xx_raises(self, api, session):
        session.request.return_value = make_response(status_code=500, reason="Internal Server Error")

        with pytest.raises(ApiRequestError) as exc_info:
            api.get_tasks()

        assert str(exc_info.value) == "API request failed: 500 Internal Server Error"
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value, StorageError)

    def test_transport_error(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(StorageError):
            api.get_settings()

    def test_get_task_404_returns_none(self, api, session):
        session.request.return_value = make_response(status_code=404, reason="Not Found")
        assert api.get_task("task_missing") is None

    def test_update_task_404_raises_not_found(self, api, session):
        session.request.return_value = make_response(status_code=404, reason="Not Found")

        with pytest.raises(NotFoundError):
            api.update_task("task_missing", {"title": "x"})

    def test_import_validates_before_sending(self, api, session):
        with pytest.raises(InvalidFormatError):
            api.import_data({"version": "1.0"})
        session.request.assert_not_called()
