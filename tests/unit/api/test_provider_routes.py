"""Unit tests for the provider directory routes."""

from fastapi.testclient import TestClient

from tests.helpers import ADMIN_HEADERS, CUSTOMER_HEADERS


class TestProviderRoutes:
    def test_list_active(self, client: TestClient) -> None:
        response = client.get("/providers", headers=CUSTOMER_HEADERS)
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == ["p-elec", "p-plumb"]
        assert all(p["assignable"] for p in response.json())

    def test_list_requires_authentication(self, client: TestClient) -> None:
        assert client.get("/providers").status_code == 401

    def test_create_provider(self, client: TestClient) -> None:
        response = client.post(
            "/providers",
            json={
                "companyName": "Serrurerie Dubois",
                "managerName": "Paul Dubois",
                "workCategory": "locksmith",
                "email": "paul@dubois.fr",
            },
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["company_name"] == "Serrurerie Dubois"
        assert body["archived_at"] is None

    def test_customer_cannot_create(self, client: TestClient) -> None:
        response = client.post(
            "/providers", json={"companyName": "X"}, headers=CUSTOMER_HEADERS
        )
        assert response.status_code == 403

    def test_create_missing_fields(self, client: TestClient) -> None:
        response = client.post(
            "/providers", json={"companyName": "X"}, headers=ADMIN_HEADERS
        )
        assert response.status_code == 400
        assert response.json()["detail"]["reason"] == "missing_fields"

    def test_archive_and_restore(self, client: TestClient) -> None:
        response = client.post("/providers/p-plumb/archive", headers=ADMIN_HEADERS)
        assert response.status_code == 200
        assert response.json()["assignable"] is False

        active = client.get("/providers", headers=ADMIN_HEADERS).json()
        archived = client.get(
            "/providers", params={"active": "false"}, headers=ADMIN_HEADERS
        ).json()
        assert [p["id"] for p in active] == ["p-elec"]
        assert [p["id"] for p in archived] == ["p-plumb"]

        response = client.post("/providers/p-plumb/restore", headers=ADMIN_HEADERS)
        assert response.json()["assignable"] is True

    def test_update_refuses_archival_field(self, client: TestClient) -> None:
        response = client.patch(
            "/providers/p-plumb",
            json={"archived_at": "2026-01-01T00:00:00Z"},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 422

    def test_update(self, client: TestClient) -> None:
        response = client.patch(
            "/providers/p-plumb", json={"city": "Lyon"}, headers=ADMIN_HEADERS
        )
        assert response.status_code == 200
        assert response.json()["city"] == "Lyon"

    def test_unknown_provider(self, client: TestClient) -> None:
        response = client.get("/providers/ghost", headers=ADMIN_HEADERS)
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "provider_not_found"
