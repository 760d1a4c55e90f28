# tests/services/test_pool_api.py
"""
Тесты HTTP API сервиса подбора попутчиков.
"""

from __future__ import annotations

import inspect
from datetime import date, timedelta
from typing import Any, Callable, Iterator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from travel_pool.common.constants import GroupStatus
from travel_pool.core.groups.models import TravelGroup
from travel_pool.core.requests.models import TravelRequest
from travel_pool.core.users.models import User
from travel_pool.infra.record_store import RecordStore
from travel_pool.services.pool_api.app import create_app
from travel_pool.services.pool_api.routes import groups_router, handshakes_router, requests_router

API = "/api/v1"
FUTURE_DATE = (date.today() + timedelta(days=3)).isoformat()


@pytest.fixture
def client(store: RecordStore, users: dict[str, User]) -> Iterator[TestClient]:
    app = create_app(store=store, initialize=False)
    with TestClient(app) as test_client:
        yield test_client


def request_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "user_id": "u1",
        "route": "vit-to-katpadi",
        "date": FUTURE_DATE,
        "time": "09:00:00",
        "vehicle_type": "auto",
        "group_size": 2,
        "gender_preference": "mixed",
    }
    payload.update(overrides)
    return payload


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "pool_api"}


class TestAppLifecycle:
    """Тесты жизненного цикла приложения."""

    def test_handlers_run_in_threadpool(self) -> None:
        """Проверяет, что обработчики синхронные и не блокируют цикл событий вызовами хранилища."""
        for router in (requests_router, handshakes_router, groups_router):
            for route in router.routes:
                assert not inspect.iscoroutinefunction(route.endpoint), route.path

    def test_built_store_is_closed_on_shutdown(self) -> None:
        """Проверяет закрытие хранилища, созданного при старте."""
        built_store = MagicMock()

        with patch(
            "travel_pool.services.pool_api.app.build_record_store",
            return_value=built_store,
        ):
            app = create_app(initialize=False)
            with TestClient(app) as test_client:
                assert test_client.get("/health").status_code == 200

        built_store.close.assert_called_once()

    def test_injected_store_is_not_closed(self) -> None:
        injected = MagicMock()

        app = create_app(store=injected, initialize=False)
        with TestClient(app):
            pass

        injected.close.assert_not_called()


class TestRequestsApi:
    """Тесты эндпоинтов заявок."""

    def test_create_request(self, client: TestClient) -> None:
        response = client.post(f"{API}/requests/", json=request_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert body["route"] == "vit-to-katpadi"

    def test_create_request_in_past(self, client: TestClient) -> None:
        """Проверяет ответ 400 для времени в прошлом."""
        payload = request_payload(date=(date.today() - timedelta(days=1)).isoformat())

        response = client.post(f"{API}/requests/", json=payload)

        assert response.status_code == 400

    def test_create_request_invalid_group_size(self, client: TestClient) -> None:
        response = client.post(f"{API}/requests/", json=request_payload(group_size=5))

        assert response.status_code == 422

    def test_get_missing_request(self, client: TestClient) -> None:
        assert client.get(f"{API}/requests/missing").status_code == 404

    def test_matches(self, client: TestClient) -> None:
        """Проверяет поиск кандидатов через API."""
        own = client.post(f"{API}/requests/", json=request_payload()).json()
        client.post(f"{API}/requests/", json=request_payload(user_id="u2", time="09:10:00"))

        response = client.get(f"{API}/requests/{own['id']}/matches")

        assert response.status_code == 200
        [candidate] = response.json()
        assert candidate["score"] == 135
        assert candidate["user"]["name"] == "Ravi"
        assert candidate["reasons"][-1] == "Mixed group preference"

    def test_list_requests(self, client: TestClient) -> None:
        client.post(f"{API}/requests/", json=request_payload())
        client.post(f"{API}/requests/", json=request_payload(user_id="u2"))

        assert len(client.get(f"{API}/requests/").json()) == 2
        assert [r["user_id"] for r in client.get(f"{API}/requests/", params={"user_id": "u2"}).json()] == ["u2"]

    def test_update_status(self, client: TestClient) -> None:
        created = client.post(f"{API}/requests/", json=request_payload()).json()

        response = client.patch(f"{API}/requests/{created['id']}/status", json={"status": "matched"})
        assert response.status_code == 200
        assert response.json()["status"] == "matched"

        response = client.patch(f"{API}/requests/{created['id']}/status", json={"status": "active"})
        assert response.status_code == 400


class TestHandshakeApi:
    """Тесты эндпоинтов запросов на объединение."""

    def test_accept_forms_group(self, client: TestClient) -> None:
        client.post(f"{API}/requests/", json=request_payload(user_id="u1"))
        client.post(f"{API}/requests/", json=request_payload(user_id="u2", time="09:05:00"))
        handshake = client.post(
            f"{API}/group-requests/",
            json={"from_user_id": "u1", "to_user_id": "u2"},
        ).json()

        assert [r["id"] for r in client.get(f"{API}/group-requests/incoming/u2").json()] == [handshake["id"]]

        response = client.post(f"{API}/group-requests/{handshake['id']}/accept")

        assert response.status_code == 200
        body = response.json()
        assert body["group_formed"] is True
        assert body["group"]["members"] == ["u2", "u1"]
        assert body["request"]["status"] == "accepted"

    def test_accept_without_requests(self, client: TestClient) -> None:
        handshake = client.post(
            f"{API}/group-requests/",
            json={"from_user_id": "u1", "to_user_id": "u2"},
        ).json()

        body = client.post(f"{API}/group-requests/{handshake['id']}/accept").json()

        assert body["group_formed"] is False
        assert body["group"] is None

    def test_closed_request_conflict(self, client: TestClient) -> None:
        """Проверяет ответ 409 для уже закрытого запроса."""
        handshake = client.post(
            f"{API}/group-requests/",
            json={"from_user_id": "u1", "to_user_id": "u2"},
        ).json()

        assert client.post(f"{API}/group-requests/{handshake['id']}/cancel").json()["status"] == "rejected"
        assert client.post(f"{API}/group-requests/{handshake['id']}/accept").status_code == 409
        assert client.post(f"{API}/group-requests/missing/reject").status_code == 404


class TestGroupsApi:
    """Тесты эндпоинтов групп."""

    @pytest.fixture
    def group(self, store: RecordStore, make_group: Callable[..., TravelGroup]) -> TravelGroup:
        group = make_group(members=["u1", "u2"])
        store.travel_groups.put(group)
        return group

    def test_get_and_list(self, client: TestClient, group: TravelGroup) -> None:
        assert client.get(f"{API}/groups/{group.id}").json()["members"] == ["u1", "u2"]
        assert [g["id"] for g in client.get(f"{API}/groups/", params={"user_id": "u2"}).json()] == [group.id]
        assert client.get(f"{API}/groups/missing").status_code == 404

    def test_confirm(self, client: TestClient, group: TravelGroup) -> None:
        response = client.post(f"{API}/groups/{group.id}/confirm")

        assert response.json()["status"] == GroupStatus.CONFIRMED.value

    def test_confirm_member(self, client: TestClient, group: TravelGroup) -> None:
        response = client.post(f"{API}/groups/{group.id}/members/u1/confirm")
        assert response.json()["confirmed_members"] == ["u1"]

        assert client.post(f"{API}/groups/{group.id}/members/u9/confirm").status_code == 400

    def test_leave_deletes_pair(self, client: TestClient, store: RecordStore, group: TravelGroup) -> None:
        """Проверяет удаление группы при выходе участника из пары."""
        body = client.delete(f"{API}/groups/{group.id}/members/u1").json()

        assert body == {"group": None, "group_deleted": True}
        assert store.travel_groups.get(group.id) is None

    def test_merge(
        self,
        client: TestClient,
        store: RecordStore,
        group: TravelGroup,
        make_group: Callable[..., TravelGroup],
    ) -> None:
        target = make_group(members=["u3", "u4"])
        store.travel_groups.put(target)

        targets = client.get(f"{API}/groups/{group.id}/merge-targets", params={"user_id": "u1"}).json()
        assert [g["id"] for g in targets] == [target.id]

        response = client.post(f"{API}/groups/{group.id}/merge", json={"target_group_id": target.id})

        assert response.status_code == 200
        assert response.json()["members"] == ["u3", "u4", "u1", "u2"]
        assert store.travel_groups.get(group.id).status == GroupStatus.COMPLETED

    def test_merge_into_itself(self, client: TestClient, group: TravelGroup) -> None:
        response = client.post(f"{API}/groups/{group.id}/merge", json={"target_group_id": group.id})

        assert response.status_code == 400

    def test_delete(self, client: TestClient, group: TravelGroup) -> None:
        assert client.delete(f"{API}/groups/{group.id}").json() == {"deleted": True}
        assert client.delete(f"{API}/groups/{group.id}").json() == {"deleted": False}

    def test_chat(self, client: TestClient, group: TravelGroup) -> None:
        response = client.post(
            f"{API}/groups/{group.id}/messages",
            json={"user_id": "u2", "message": "Meet at main gate"},
        )

        assert response.status_code == 201
        assert response.json()["user_name"] == "Ravi"

        messages = client.get(f"{API}/groups/{group.id}/messages").json()
        assert [m["message"] for m in messages] == ["Meet at main gate"]

        blank = client.post(f"{API}/groups/{group.id}/messages", json={"user_id": "u2", "message": "   "})
        assert blank.status_code == 400
