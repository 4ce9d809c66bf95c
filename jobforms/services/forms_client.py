"""
Client for the forms persistence API.

Talks to `/application-forms` over aiohttp. One attempt per call, no retry:
callers decide how to surface a FormsApiError. `save_form` matches the
FormBuilder `on_save` signature so a client can be handed to the builder
directly.
"""
import logging
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError

from jobforms.config import settings
from jobforms.schemas.form import FormDefinition

logger = logging.getLogger(__name__)


class FormsApiError(Exception):
    """Raised when the forms API rejects a request or returns garbage."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class FormsApiClient:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
    ):
        self.session = session
        self.base_url = (base_url or settings.forms_api_url).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_s or settings.forms_api_timeout_seconds)

    async def _request(
        self,
        method: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        try:
            async with self.session.request(
                method,
                self.base_url,
                params=params,
                json=json_body,
                timeout=self.timeout
            ) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError:
                    body = await resp.text(errors="ignore")
                    logger.error(f"Forms API {method} returned non-JSON (status={resp.status}): {body[:200]!r}")
                    raise FormsApiError("Forms API returned an invalid response", status=resp.status)

                if resp.status >= 400 or not isinstance(data, dict) or data.get("success") is False:
                    detail = (data.get("error") or data.get("detail")) if isinstance(data, dict) else None
                    logger.warning(f"Forms API {method} {params} failed: status={resp.status} detail={detail}")
                    raise FormsApiError(detail or f"Forms API request failed ({resp.status})", status=resp.status)
                return data
        except aiohttp.ClientError as e:
            logger.error(f"Forms API {method} request error: {type(e).__name__}: {e}")
            raise FormsApiError(f"Forms API unreachable: {e}") from e

    async def fetch_form(self, job_id: int) -> Optional[FormDefinition]:
        """Active form for `job_id`, or None when the job uses the default form."""
        data = await self._request("GET", params={"jobId": str(job_id)})
        form = data.get("form")
        if not form:
            logger.info(f"No custom form for job {job_id}")
            return None
        try:
            definition = FormDefinition.model_validate(form)
        except ValidationError as e:
            raise FormsApiError(f"Form for job {job_id} has an invalid schema: {e}") from e
        if definition.job_id is None:
            definition.job_id = job_id
        return definition

    async def create_form(self, definition: FormDefinition) -> dict[str, Any]:
        data = await self._request("POST", json_body=definition.to_payload())
        logger.info(f"Created form for job {definition.job_id}: {data.get('form', {}).get('id')}")
        return data

    async def update_form(self, form_id: int, definition: FormDefinition) -> dict[str, Any]:
        data = await self._request("PUT", params={"id": str(form_id)}, json_body=definition.to_payload())
        logger.info(f"Updated form {form_id} for job {definition.job_id}")
        return data

    async def save_form(self, definition: FormDefinition, form_id: Optional[int] = None) -> dict[str, Any]:
        """Update when `form_id` is known, otherwise create."""
        if form_id is not None:
            return await self.update_form(form_id, definition)
        return await self.create_form(definition)
