"""
Authentication Route Tests

Tests the account/session endpoints under /api/auth: what is forwarded to
Appwrite, with which credential, and how results and errors come back.
"""

import pytest
from fastapi import status

from backend_fakes import SESSION_TOKEN, appwrite_error, backend_route, last_request, sent_json

USER = {"$id": "u1", "email": "maria@igreja.org", "name": "Maria"}
SESSION = {"$id": "s1", "userId": "u1", "secret": "session-secret"}


# ============================================================================
# Register
# ============================================================================

class TestRegister:
    """POST /api/auth/register"""

    def test_creates_account_then_session(self, client, appwrite):
        create = backend_route(appwrite, "POST", "/account", status=201, json=USER)
        login = backend_route(appwrite, "POST", "/account/sessions/email", status=201, json=SESSION)

        response = client.post(
            "/api/auth/register",
            json={"email": "maria@igreja.org", "password": "s3nha-forte", "name": "Maria"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"user": USER, "session": SESSION}

        sent = sent_json(create)
        assert sent["email"] == "maria@igreja.org"
        assert sent["password"] == "s3nha-forte"
        assert sent["name"] == "Maria"
        assert isinstance(sent["userId"], str) and sent["userId"]
        assert sent_json(login) == {"email": "maria@igreja.org", "password": "s3nha-forte"}

    def test_uses_server_api_key(self, client, appwrite):
        create = backend_route(appwrite, "POST", "/account", status=201, json=USER)
        backend_route(appwrite, "POST", "/account/sessions/email", status=201, json=SESSION)

        client.post("/api/auth/register", json={"email": "a@b.c", "password": "12345678"})

        request = last_request(create)
        assert request.headers["X-Appwrite-Key"] == "test-api-key"
        assert request.headers["X-Appwrite-Project"] == "test-project"

    def test_existing_account_error_is_relayed(self, client, appwrite):
        appwrite_error(
            appwrite, "POST", "/account", 409,
            "A user with the same email already exists", "user_already_exists",
        )
        login = backend_route(appwrite, "POST", "/account/sessions/email", status=201, json=SESSION)

        response = client.post("/api/auth/register", json={"email": "a@b.c", "password": "12345678"})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {
            "error": "A user with the same email already exists",
            "type": "user_already_exists",
        }
        assert login.call_count == 0

    def test_missing_fields_never_reach_backend(self, client, appwrite):
        response = client.post("/api/auth/register", json={"name": "Maria"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == 'Missing required parameter: "email"'
        assert not appwrite.calls

    def test_empty_account_response_still_returns_session(self, client, appwrite):
        backend_route(appwrite, "POST", "/account", status=201)
        backend_route(appwrite, "POST", "/account/sessions/email", status=201, json=SESSION)

        response = client.post("/api/auth/register", json={"email": "a@b.c", "password": "12345678"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["session"] == SESSION


# ============================================================================
# Login / Logout
# ============================================================================

class TestLogin:
    """POST /api/auth/login"""

    def test_returns_session(self, client, appwrite):
        backend_route(appwrite, "POST", "/account/sessions/email", status=201, json=SESSION)

        response = client.post("/api/auth/login", json={"email": "a@b.c", "password": "12345678"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"session": SESSION}

    def test_invalid_credentials_relayed(self, client, appwrite):
        appwrite_error(
            appwrite, "POST", "/account/sessions/email", 401,
            "Invalid credentials. Please check the email and password.",
            "user_invalid_credentials",
        )

        response = client.post("/api/auth/login", json={"email": "a@b.c", "password": "wrong"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["type"] == "user_invalid_credentials"

    @pytest.mark.parametrize("kwargs", [{}, {"json": [1, 2]}, {"json": "a@b.c"}])
    def test_unusable_body_reported_as_missing_parameter(self, client, appwrite, kwargs):
        response = client.post("/api/auth/login", **kwargs)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == 'Missing required parameter: "email"'
        assert "type" in response.json()
        assert not appwrite.calls

    def test_wrongly_typed_field_is_forwarded(self, client, appwrite):
        route = appwrite_error(
            appwrite, "POST", "/account/sessions/email", 400,
            "Invalid `email` param: Value must be a valid email address", "general_argument_invalid",
        )

        response = client.post("/api/auth/login", json={"email": 123, "password": "12345678"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["type"] == "general_argument_invalid"
        assert sent_json(route)["email"] == 123


class TestLogout:
    """POST /api/auth/logout"""

    def test_deletes_session_from_body(self, client, appwrite):
        route = backend_route(appwrite, "DELETE", "/account/sessions/s1", status=204)

        response = client.post("/api/auth/logout", json={"sessionId": "s1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        assert last_request(route).headers["X-Appwrite-Key"] == "test-api-key"

    def test_uses_caller_session_when_sent(self, client, appwrite, session_headers):
        route = backend_route(appwrite, "DELETE", "/account/sessions/current", status=204)

        response = client.post("/api/auth/logout", json={"sessionId": "current"}, headers=session_headers)

        assert response.json() == {"success": True}
        request = last_request(route)
        assert request.headers["X-Appwrite-Session"] == SESSION_TOKEN
        assert "X-Appwrite-Key" not in request.headers

    def test_missing_session_id(self, client, appwrite):
        response = client.post("/api/auth/logout", json={})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"].startswith("Missing required parameter")
        assert not appwrite.calls

    def test_unknown_session_relayed(self, client, appwrite):
        appwrite_error(appwrite, "DELETE", "/account/sessions/nope", 404, "Session not found", "user_session_not_found")

        response = client.post("/api/auth/logout", json={"sessionId": "nope"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Session not found", "type": "user_session_not_found"}


# ============================================================================
# Current User
# ============================================================================

class TestCurrentUser:
    """GET /api/auth/user"""

    def test_returns_user_for_session(self, client, appwrite, session_headers):
        route = backend_route(appwrite, "GET", "/account", json=USER)

        response = client.get("/api/auth/user", headers=session_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"user": USER}
        assert last_request(route).headers["X-Appwrite-Session"] == SESSION_TOKEN

    def test_expired_session_relayed(self, client, appwrite, session_headers):
        appwrite_error(
            appwrite, "GET", "/account", 401,
            "User (role: guests) missing scope (account)", "general_unauthorized_scope",
        )

        response = client.get("/api/auth/user", headers=session_headers)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["type"] == "general_unauthorized_scope"


# ============================================================================
# Recovery
# ============================================================================

class TestRecovery:
    """POST /api/auth/recovery"""

    def test_uses_default_redirect_url(self, client, appwrite, mock_settings):
        route = backend_route(appwrite, "POST", "/account/recovery", status=201, json={"$id": "token-1"})

        response = client.post("/api/auth/recovery", json={"email": "a@b.c"})

        assert response.json() == {"success": True}
        assert sent_json(route) == {"email": "a@b.c", "url": mock_settings.RECOVERY_REDIRECT_URL}

    def test_uses_client_redirect_url(self, client, appwrite):
        route = backend_route(appwrite, "POST", "/account/recovery", status=201, json={"$id": "token-1"})

        client.post(
            "/api/auth/recovery",
            json={"email": "a@b.c", "redirectUrl": "https://musicas.example.org/reset"},
        )

        assert sent_json(route)["url"] == "https://musicas.example.org/reset"

    @pytest.mark.parametrize("code", [400, 404, 429])
    def test_errors_relayed(self, client, appwrite, code):
        appwrite_error(appwrite, "POST", "/account/recovery", code, "Recovery failed", "general_argument_invalid")

        response = client.post("/api/auth/recovery", json={"email": "a@b.c"})

        assert response.status_code == code
        assert response.json() == {"error": "Recovery failed", "type": "general_argument_invalid"}
