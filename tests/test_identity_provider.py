import asyncio
import json

import httpx
import pytest

from campbook.core.exceptions import ExternalServiceError
from campbook.services.identity_provider import FirebaseIdentityProvider, IdentityProviderError

BASE_URL = "https://identity.test/v1"


def make_provider(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirebaseIdentityProvider(api_key="test-key", base_url=BASE_URL, client=client)


def error_response(message, status=400):
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


def test_create_account_posts_to_sign_up():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["key"] = request.url.params["key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"localId": "abc123", "email": "jane@example.com", "idToken": "t"})

    provider = make_provider(handler)
    profile = asyncio.run(provider.create_account("jane@example.com", "pw123456", "Jane", "+1234567890"))

    assert seen["path"] == "/v1/accounts:signUp"
    assert seen["key"] == "test-key"
    assert seen["body"]["displayName"] == "Jane"
    assert seen["body"]["returnSecureToken"] is True
    assert profile.uid == "abc123"
    assert profile.phone_number == "+1234567890"


def test_error_code_is_parsed_from_message():
    provider = make_provider(lambda request: error_response("WEAK_PASSWORD : Password should be at least 6 characters"))

    with pytest.raises(IdentityProviderError) as exc_info:
        asyncio.run(provider.create_account("jane@example.com", "pw", "Jane"))

    assert exc_info.value.code == "WEAK_PASSWORD"
    assert "at least 6 characters" in exc_info.value.message


def test_verify_token_uses_lookup():
    def handler(request):
        assert request.url.path == "/v1/accounts:lookup"
        assert json.loads(request.content) == {"idToken": "the-token"}
        return httpx.Response(200, json={"users": [{
            "localId": "abc123",
            "email": "jane@example.com",
            "displayName": "Jane",
        }]})

    profile = asyncio.run(make_provider(handler).verify_token("the-token"))
    assert profile.uid == "abc123"
    assert profile.display_name == "Jane"
    assert profile.phone_number is None


def test_verify_token_rejects_invalid_token():
    provider = make_provider(lambda request: error_response("INVALID_ID_TOKEN"))
    with pytest.raises(IdentityProviderError) as exc_info:
        asyncio.run(provider.verify_token("bad"))
    assert exc_info.value.code == "INVALID_ID_TOKEN"


def test_sign_in_returns_session_token():
    def handler(request):
        assert request.url.path == "/v1/accounts:signInWithPassword"
        return httpx.Response(200, json={"localId": "abc123", "idToken": "session", "email": "jane@example.com"})

    result = asyncio.run(make_provider(handler).sign_in("jane@example.com", "pw"))
    assert result.uid == "abc123"
    assert result.id_token == "session"


def test_password_reset_request_type():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"email": "jane@example.com"})

    asyncio.run(make_provider(handler).send_password_reset("jane@example.com"))
    assert seen["body"] == {"requestType": "PASSWORD_RESET", "email": "jane@example.com"}


def test_upstream_outage_is_external_service_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalServiceError):
        asyncio.run(make_provider(handler).sign_in("jane@example.com", "pw"))

    with pytest.raises(ExternalServiceError):
        asyncio.run(make_provider(lambda request: httpx.Response(503, text="unavailable")).sign_in("a@b.c", "pw"))
