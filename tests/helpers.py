from typing import Any, Dict

from fastapi.testclient import TestClient


def register_tenant(client: TestClient, tenant_id: str = "jane-doe", email: str = "jane@example.com",
                    password: str = "s3cret-pass", ip: str = "10.0.0.1") -> Any:
    """POST a registration; call sites pick distinct client IPs to stay under the register limit."""
    return client.post(
        "/api/v1/tenants/register",
        json={
            "tenantName": tenant_id.replace("-", " ").title(),
            "tenantId": tenant_id,
            "adminEmail": email,
            "password": password,
        },
        headers={"X-Forwarded-For": ip},
    )


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def owner_from(response) -> Dict[str, Any]:
    assert response.status_code == 201, response.text
    body = response.json()
    token = body["session"]["access_token"]
    return {"tenant": body["tenant"], "token": token, "headers": auth_headers(token), "user": body["user"]}
