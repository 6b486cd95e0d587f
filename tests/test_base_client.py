"""
Tests for BaseClient.
"""
import asyncio
import json

import httpx
import pytest
import respx

from marketplace_client.cancel import CancellationToken
from marketplace_client.config import ClientConfig
from marketplace_client.core.base_client import BaseClient, _format_body
from marketplace_client.errors import ApiError, StreamIncompleteError
from marketplace_client.session import LOGGING_OUT_KEY
from marketplace_client.types import BlobResponse, MultipartForm

from .conftest import BASE_URL, chunked


def make_client(config, session, notifier, navigator, **kwargs):
    return BaseClient(config, session=session, notifier=notifier, navigator=navigator, **kwargs)


@pytest.mark.asyncio
async def test_base_client_lifecycle(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        assert client._client is not None
        assert not client._client.is_closed

    assert client._client is None


@pytest.mark.asyncio
async def test_external_httpx_client_is_not_closed(session, notifier, navigator):
    http = httpx.AsyncClient(base_url=BASE_URL)
    config = ClientConfig(base_url=BASE_URL, httpx_client=http)
    async with make_client(config, session, notifier, navigator):
        pass
    assert not http.is_closed
    await http.aclose()


@pytest.mark.asyncio
async def test_json_body_sets_content_type(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/api/brief").respond(201, json={"success": True})

            res = await client.request("/api/brief", {"method": "POST", "body": {"title": "Logo"}})

            assert res == {"success": True}
            request = route.calls.last.request
            assert request.headers["content-type"] == "application/json"
            assert json.loads(request.read()) == {"title": "Logo"}


@pytest.mark.asyncio
async def test_explicit_content_type_is_kept(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/api/raw").respond(200, json={})

            await client.request(
                "/api/raw",
                {"method": "POST", "body": "a=1", "headers": {"content-type": "text/plain"}},
            )

            assert route.calls.last.request.headers["content-type"] == "text/plain"


@pytest.mark.asyncio
async def test_multipart_form_never_sets_json_content_type(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/api/brief/1/upload").respond(200, json={"success": True})

            form = MultipartForm().add_file("files", "ref.png", b"\x89PNG", "image/png").add_field("note", "hi")
            await client.request("/api/brief/1/upload", {"method": "POST", "body": form})

            request = route.calls.last.request
            assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
            body = request.read()
            assert b'filename="ref.png"' in body
            assert b'name="note"' in body


@pytest.mark.asyncio
async def test_multipart_form_with_fields_only(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/api/complaint/submit").respond(200, json={})

            await client.request(
                "/api/complaint/submit",
                {"method": "POST", "body": MultipartForm(fields={"reason": "copyright"})},
            )

            request = route.calls.last.request
            assert request.headers["content-type"].startswith("multipart/form-data")
            assert b"copyright" in request.read()


@pytest.mark.asyncio
async def test_auth_token_header_from_session(config, session, notifier, navigator):
    session.sign_in({"name": "Ada"}, "tok-123")
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/api/user/details").respond(200, json={})

            await client.request("/api/user/details")

            assert route.calls.last.request.headers["auth-token"] == "tok-123"
            assert "authorization" not in route.calls.last.request.headers


@pytest.mark.asyncio
async def test_no_auth_header_without_token(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/api/singleprice").respond(200, json=[])

            await client.request("/api/singleprice")

            assert "auth-token" not in route.calls.last.request.headers


@pytest.mark.asyncio
async def test_static_token_overrides_session(config, session, notifier, navigator):
    session.sign_in({}, "session-token")
    async with make_client(config, session, notifier, navigator, token="service-token") as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/api/wallet/balance").respond(200, json={})

            await client.request("/api/wallet/balance")

            assert route.calls.last.request.headers["auth-token"] == "service-token"


@pytest.mark.asyncio
async def test_static_token_dropped_after_expired_session(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator, token="static-tok") as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat").respond(401, json={"message": "jwt expired"})
            details = mock.get("/api/user/details").respond(200, json={"user": {}})

            with pytest.raises(ApiError):
                await client.request("/api/chat")
            await client.request("/api/user/details")

            assert "auth-token" not in details.calls.last.request.headers
    assert navigator.paths == ["/"]


@pytest.mark.asyncio
async def test_text_response_is_wrapped(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/healthz").respond(200, text="ok")

            assert await client.request("/healthz") == {"message": "ok"}


@pytest.mark.asyncio
async def test_blob_response_keeps_headers(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/stripe/download/9").respond(
                200,
                content=b"\x00\x01binary",
                headers={"Content-Disposition": 'attachment; filename="artwork.png"'},
            )

            res = await client.request("/api/stripe/download/9", {"response_type": "blob"})

            assert isinstance(res, BlobResponse)
            assert res.data == b"\x00\x01binary"
            assert res.status == 200
            assert res.filename == "artwork.png"


@pytest.mark.asyncio
async def test_blob_error_reads_message_from_body(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/stripe/download/9").respond(400, json={"message": "License expired"})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/stripe/download/9", {"response_type": "blob"})

            assert exc.value.message == "License expired"
            assert exc.value.status == 400
            assert notifier.messages == ["License expired"]


@pytest.mark.asyncio
async def test_streaming_request_headers_and_progress(config, session, notifier, navigator):
    body = (
        b'{"type":"stage","data":{"stage":"a"}}\n'
        b'{"type":"stage","data":{"stage":"b"}}\n'
        b'{"type":"complete","data":{"ok":true}}\n'
    )
    stages = []
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/api/chat/1/messages").respond(
                200, content=body, headers={"Content-Type": "application/x-ndjson"}
            )

            res = await client.request(
                "/api/chat/1/messages",
                {"method": "POST", "body": {"content": "hi"}, "on_progress": stages.append},
            )

            assert res == {"ok": True}
            assert [s["stage"] for s in stages] == ["a", "b"]
            request = route.calls.last.request
            assert request.headers["x-stream-progress"] == "1"
            assert request.headers["accept"] == "application/x-ndjson"


@pytest.mark.asyncio
async def test_streaming_keeps_caller_accept_header(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/api/chat/1/messages").respond(200, content=b'{"type":"complete","data":{}}\n')

            await client.request(
                "/api/chat/1/messages",
                {"method": "POST", "headers": {"Accept": "*/*"}, "on_progress": lambda d: None},
            )

            assert route.calls.last.request.headers["accept"] == "*/*"


@pytest.mark.asyncio
async def test_streaming_error_event_raises(config, session, notifier, navigator):
    body = (
        b'{"type":"error","data":{"message":"x"}}\n'
        b'{"type":"stage","data":{"stage":"late"}}\n'
        b'{"type":"complete","data":{"ok":true}}\n'
    )
    stages = []
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/chat/1/messages").respond(200, content=body)

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat/1/messages", {"method": "POST", "on_progress": stages.append})

            assert exc.value.message == "x"
            assert exc.value.type == "stream"
            assert stages == []
            assert notifier.messages == ["x"]


@pytest.mark.asyncio
async def test_streaming_bare_object_is_payload(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/chat/1/messages").respond(200, content=b'{"success":true,"data":{"id":"m1"}}\n')

            res = await client.request("/api/chat/1/messages", {"method": "POST", "on_progress": lambda d: None})

            assert res == {"success": True, "data": {"id": "m1"}}


@pytest.mark.asyncio
async def test_streaming_without_payload_raises(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/chat/1/messages").respond(200, content=b'{"type":"stage","data":{}}\n')

            with pytest.raises(StreamIncompleteError) as exc:
                await client.request("/api/chat/1/messages", {"method": "POST", "on_progress": lambda d: None})

            assert "Stream ended without a completion payload" in exc.value.message
            assert exc.value.endpoint == "/api/chat/1/messages"
            assert notifier.messages == [exc.value.message]


@pytest.mark.asyncio
async def test_streaming_401_with_empty_body_expires_session(config, session, notifier, navigator, storage):
    session.sign_in({"name": "Ada"}, "tok")
    stages = []
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/chat/1/messages").respond(401, content=b"")

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat/1/messages", {"method": "POST", "on_progress": stages.append})

    assert not isinstance(exc.value, StreamIncompleteError)
    assert exc.value.status == 401
    assert exc.value.message == "Please log in to continue"
    assert stages == []
    assert navigator.paths == ["/"]
    assert storage.get_item("token") is None


@pytest.mark.asyncio
async def test_streaming_server_error_uses_json_body(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/chat/1/messages").respond(502, json={"message": "Upstream model failed"})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat/1/messages", {"method": "POST", "on_progress": lambda d: None})

    assert exc.value.status == 502
    assert exc.value.message == "Upstream model failed"
    assert notifier.messages == ["Upstream model failed"]


@pytest.mark.asyncio
async def test_streaming_multibyte_split_across_chunks(session, notifier, navigator):
    payload = '{"type":"complete","data":{"caption":"Ünïcödé ✨"}}\n'.encode("utf-8")
    cut = payload.index("✨".encode("utf-8")) + 2

    def handler(request):
        return httpx.Response(200, content=chunked([payload[:cut], payload[cut:]]))

    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    config = ClientConfig(base_url=BASE_URL, httpx_client=http)
    client = make_client(config, session, notifier, navigator)

    res = await client.request("/api/chat/1/messages", {"method": "POST", "on_progress": lambda d: None})

    assert res == {"caption": "Ünïcödé ✨"}
    await http.aclose()


@pytest.mark.asyncio
async def test_login_401_keeps_session(config, session, notifier, navigator):
    session.sign_in({"name": "Ada"}, "old-token")
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/user/login").respond(401, json={"message": "Wrong password"})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/user/login", {"method": "POST", "body": {"email": "a@b.c"}})

            assert exc.value.status == 401
            assert exc.value.message == "Wrong password"
            assert session.token == "old-token"
            assert navigator.paths == []
            assert notifier.messages == ["Wrong password"]


@pytest.mark.asyncio
async def test_login_401_without_message(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/api/user/login").respond(401, json={})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/user/login", {"method": "POST", "body": {}})

            assert exc.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_expired_session_redirects_once(config, session, notifier, navigator, storage):
    session.sign_in({"name": "Ada"}, "expired")
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat").respond(401, json={"message": "jwt expired"})
            mock.get("/api/notification").respond(401, json={})
            mock.get("/api/wallet/balance").respond(401, json={})

            results = await asyncio.gather(
                client.request("/api/chat"),
                client.request("/api/notification"),
                client.request("/api/wallet/balance"),
                return_exceptions=True,
            )

    assert all(isinstance(r, ApiError) for r in results)
    assert all(r.message == "Please log in to continue" for r in results)
    assert navigator.paths == ["/"]
    assert storage.get_item("token") is None
    assert storage.get_item("user") is None
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_unauthorized_during_logout_is_silent(config, session, notifier, navigator, storage):
    storage.set_item(LOGGING_OUT_KEY, "true")
    storage.set_item("token", "still-here")
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/notification").respond(401, json={})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/notification")

    assert exc.value.silent is True
    assert exc.value.status == 401
    assert navigator.paths == []
    assert notifier.messages == []
    assert session.is_redirecting() is False


@pytest.mark.asyncio
async def test_not_found_raises_without_notification(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat/missing").respond(404, json={"message": "Chat not found"})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat/missing")

    assert exc.value.status == 404
    assert exc.value.message == "The requested resource was not found"
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_server_error_notifies(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/brief").respond(500, text="Internal Server Error")

            with pytest.raises(ApiError) as exc:
                await client.request("/api/brief")

    assert exc.value.message == "Server error. Please try again later"
    assert exc.value.timestamp
    assert notifier.messages == ["Server error. Please try again later"]


@pytest.mark.asyncio
async def test_network_error(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat").mock(side_effect=httpx.ConnectError("connection refused"))

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat")

    assert exc.value.type == "network"
    assert exc.value.status is None
    assert isinstance(exc.value.original_error, httpx.ConnectError)
    assert notifier.messages == ["Network error. Please check your connection."]


@pytest.mark.asyncio
async def test_timeout_error(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat").mock(side_effect=httpx.ReadTimeout("too slow"))

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat")

    assert exc.value.type == "timeout"
    assert exc.value.message == "Request timed out. Please try again."


@pytest.mark.asyncio
async def test_network_error_during_logout_is_not_notified(config, session, notifier, navigator, storage):
    storage.set_item(LOGGING_OUT_KEY, "true")
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat").mock(side_effect=httpx.ConnectError("down"))

            with pytest.raises(ApiError):
                await client.request("/api/chat")

    assert notifier.messages == []


@pytest.mark.asyncio
async def test_cancelled_request_is_not_sent(config, session, notifier, navigator):
    token = CancellationToken()
    token.cancel()
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
            route = mock.get("/api/chat").respond(200, json={})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat", {"cancel_token": token})

            assert exc.value.type == "timeout"
            assert route.called is False


@pytest.mark.asyncio
async def test_invalid_json_is_unexpected(config, session, notifier, navigator):
    async with make_client(config, session, notifier, navigator) as client:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/api/chat").respond(200, content=b"{broken", headers={"Content-Type": "application/json"})

            with pytest.raises(ApiError) as exc:
                await client.request("/api/chat")

    assert exc.value.type == "unexpected"
    assert notifier.messages == ["An unexpected error occurred. Please try again."]


def test_format_body_safety():
    assert _format_body(None) == "<empty>"
    assert _format_body(b"1234") == "<binary data: 4 bytes>"
    assert _format_body({"a": 1}) == '{"a": 1}'

    long_str = "a" * 6000
    formatted = _format_body(long_str)
    assert len(formatted) < 6000
    assert "... (truncated)" in formatted
