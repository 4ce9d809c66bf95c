"""
Tests for the forms persistence API client against a local aiohttp server.
"""
from typing import AsyncGenerator

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from jobforms.schemas.form import FormDefinition
from jobforms.services.form_builder import FormBuilder
from jobforms.services.forms_client import FormsApiClient, FormsApiError

STORED_FORM = {
    "id": 11,
    "title": "Warehouse screening",
    "description": "",
    "jobId": 5,
    "fields": [
        {"id": "forklift", "type": "radio", "label": "Forklift licence?", "options": ["Yes", "No"]},
    ],
}


class FakeFormsApi:
    """Records requests and answers like the forms endpoint."""

    def __init__(self):
        self.requests = []

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json() if request.can_read_body else None
        self.requests.append((request.method, dict(request.query), body))

        job_id = request.query.get("jobId")
        if request.method == "GET":
            if job_id == "5":
                return web.json_response({"success": True, "form": STORED_FORM})
            if job_id == "6":
                return web.json_response({"success": True, "form": None, "message": "Using default form."})
            if job_id == "7":
                return web.Response(text="<html>oops</html>", status=502)
            return web.json_response({"success": False, "error": "Form not found"}, status=404)
        if request.method == "POST":
            if not body.get("fields"):
                return web.json_response({"error": "Form title and fields are required"}, status=400)
            return web.json_response({"success": True, "form": {"id": 12, **body}}, status=201)
        if request.method == "PUT":
            return web.json_response({"success": True, "form": {"id": int(request.query["id"]), **body}})
        return web.json_response({"error": "Method not allowed"}, status=405)


@pytest.fixture
def fake_api() -> FakeFormsApi:
    return FakeFormsApi()


@pytest_asyncio.fixture
async def forms_client(fake_api: FakeFormsApi) -> AsyncGenerator[FormsApiClient, None]:
    app = web.Application()
    app.router.add_route("*", "/api/application-forms", fake_api.handle)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as session:
            yield FormsApiClient(session, base_url=str(server.make_url("/api/application-forms")))
    finally:
        await server.close()


# ============================================================
# FETCH
# ============================================================

@pytest.mark.asyncio
async def test_fetch_form(forms_client: FormsApiClient):
    definition = await forms_client.fetch_form(5)

    assert definition.title == "Warehouse screening"
    assert definition.job_id == 5
    assert definition.fields[0].options == ["Yes", "No"]


@pytest.mark.asyncio
async def test_fetch_form_returns_none_for_default_form(forms_client: FormsApiClient):
    assert await forms_client.fetch_form(6) is None


@pytest.mark.asyncio
async def test_fetch_form_error_carries_status(forms_client: FormsApiClient):
    with pytest.raises(FormsApiError) as exc_info:
        await forms_client.fetch_form(99)
    assert exc_info.value.status == 404
    assert "Form not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_non_json_response_raises(forms_client: FormsApiClient):
    with pytest.raises(FormsApiError) as exc_info:
        await forms_client.fetch_form(7)
    assert exc_info.value.status == 502


@pytest.mark.asyncio
async def test_unreachable_server_raises():
    async with aiohttp.ClientSession() as session:
        client = FormsApiClient(session, base_url="http://127.0.0.1:9/api/application-forms", timeout_s=2)
        with pytest.raises(FormsApiError):
            await client.fetch_form(1)


# ============================================================
# SAVE
# ============================================================

@pytest.mark.asyncio
async def test_save_form_creates_when_no_id(forms_client: FormsApiClient, fake_api: FakeFormsApi):
    definition = FormDefinition(title="New", fields=[{"id": "q", "type": "text"}], jobId=5)

    data = await forms_client.save_form(definition)

    assert data["form"]["id"] == 12
    method, query, body = fake_api.requests[-1]
    assert method == "POST"
    assert body["jobId"] == 5
    assert body["fields"][0]["id"] == "q"


@pytest.mark.asyncio
async def test_save_form_updates_when_id_known(forms_client: FormsApiClient, fake_api: FakeFormsApi):
    definition = FormDefinition(title="Edited", fields=[{"id": "q", "type": "text"}], jobId=5)

    await forms_client.save_form(definition, form_id=11)

    method, query, body = fake_api.requests[-1]
    assert method == "PUT"
    assert query == {"id": "11"}
    assert body["title"] == "Edited"


@pytest.mark.asyncio
async def test_rejected_save_raises(forms_client: FormsApiClient):
    with pytest.raises(FormsApiError) as exc_info:
        await forms_client.create_form(FormDefinition(title="Empty", jobId=5))
    assert exc_info.value.status == 400


@pytest.mark.asyncio
async def test_builder_saves_through_client(forms_client: FormsApiClient, fake_api: FakeFormsApi):
    builder = FormBuilder(on_save=forms_client.save_form, job_id=5)
    builder.add_field("textarea")

    await builder.save()

    method, _, body = fake_api.requests[-1]
    assert method == "POST"
    assert [f["id"] for f in body["fields"]] == builder.field_ids
