"""Tests for the HTTP edit-sync client."""
import asyncio
import json

import httpx

from reconciliation.sync_client import HttpEditSyncClient
from schemas.enums import EditType
from schemas.reconciliation import EditChanges, EditRequest

ENDPOINT = "http://edit-sync.test/api/detection-edit-sync"


def make_request():
    return EditRequest(
        job_id="job-123",
        page_id="page-1",
        edit_type=EditType.CREATE,
        changes=EditChanges(pixel_x=10, pixel_y=20, pixel_width=30, pixel_height=40, class_name="window"),
    )


def send_with(handler):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = HttpEditSyncClient(ENDPOINT, client=http)
            return await client.send(make_request())
    return asyncio.run(go())


class TestHttpEditSyncClient:
    def test_posts_json_payload(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "detection_id": "new-det"})

        response = send_with(handler)
        assert response.success
        assert response.detection_id == "new-det"
        assert seen["url"] == ENDPOINT
        assert seen["body"]["edit_type"] == "create"
        assert seen["body"]["changes"]["class"] == "window"
        assert "detection_id" not in seen["body"]

    def test_http_error_becomes_failed_response(self):
        response = send_with(lambda request: httpx.Response(500, text="Internal Server Error"))
        assert not response.success
        assert response.error == "HTTP 500: Internal Server Error"

    def test_service_reported_failure(self):
        response = send_with(lambda request: httpx.Response(200, json={"success": False, "error": "Detection not found"}))
        assert not response.success
        assert response.error == "Detection not found"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        response = send_with(handler)
        assert not response.success
        assert "connection refused" in response.error

    def test_non_json_reply(self):
        response = send_with(lambda request: httpx.Response(200, text="<html>ok</html>"))
        assert not response.success
        assert response.error.startswith("Invalid edit-sync response")
