"""Client for listing, describing and running custom workflows."""

import os
import time
import logging
from typing import Any, Dict, Optional
from custom_workflow.domain.models import JobResult, WorkflowDefinition, WorkflowListResult
from custom_workflow.engine.submission import submit, validate_and_submit
from custom_workflow.infra.schema_cache import InMemorySchemaCache, SchemaCache
from custom_workflow.infra.transport import HttpTransport
from custom_workflow.shared.constants import (
    API_KEY_ENV_VAR,
    BASE_URL_ENV_VAR,
    DEFAULT_API_BASE_URL,
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    DEFAULT_POLLING_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    MAX_PER_PAGE,
    MAX_POLLING_TIME_SECONDS,
)
from custom_workflow.shared.exceptions import PollingTimeout
from custom_workflow.shared.utils import workflow_path


class CustomWorkflowClient:
    """Entry point for the custom workflow API.

    The API key and base URL fall back to the ``CUSTOM_WORKFLOW_API_KEY`` and
    ``CUSTOM_WORKFLOW_BASE_URL`` environment variables. A transport or schema
    cache may be injected; otherwise an ``HttpTransport`` and an in-memory
    cache are created.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        *,
        transport: Optional[HttpTransport] = None,
        schema_cache: Optional[SchemaCache] = None,
    ):
        if transport is None:
            api_key = api_key or os.getenv(API_KEY_ENV_VAR)
            if not api_key:
                raise ValueError(f"API key required (pass api_key or set {API_KEY_ENV_VAR})")
            transport = HttpTransport(
                api_key,
                base_url or os.getenv(BASE_URL_ENV_VAR, DEFAULT_API_BASE_URL),
                user_agent,
                timeout,
            )
        self.transport = transport
        self.schema_cache = schema_cache if schema_cache is not None else InMemorySchemaCache()

    def list_workflows(self, page: int = DEFAULT_PAGE, per_page: int = DEFAULT_PER_PAGE) -> WorkflowListResult:
        """Lists the authenticated user's workflows, one page at a time"""
        data = self.transport.get_json(
            "/custom",
            params={"page": page, "per_page": min(per_page, MAX_PER_PAGE)}
        )
        return WorkflowListResult.from_api(data)

    def describe_workflow(self, slug: str) -> WorkflowDefinition:
        """Returns a workflow's schema, served from the schema cache when present"""
        cached = self.schema_cache.get(slug)
        if cached is not None:
            return cached

        data = self.transport.get_json(workflow_path(slug))
        definition = WorkflowDefinition.from_api(data["data"])
        self.schema_cache.set(slug, definition)

        logging.debug(
            "Workflow schema fetched",
            extra={"slug": slug, "params": len(definition.params)}
        )
        return definition

    def clear_describe_cache(self, slug: Optional[str] = None) -> None:
        if slug is not None:
            self.schema_cache.evict(slug)
        else:
            self.schema_cache.clear()

    def execute_workflow(
        self,
        slug: str,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Runs a workflow without client-side validation; returns the status URL.

        JSON mode takes key-value pairs in ``params``. Form-data mode takes
        text fields in ``params`` and file paths keyed by param name in ``files``.
        """
        return submit(self.transport, slug, params, files)

    def validate_and_execute(
        self,
        slug: str,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Describes, validates client-side, then executes; returns the status URL"""
        return validate_and_submit(self.describe_workflow, self.transport, slug, params, files)

    def fetch_results(
        self,
        status_url: str,
        polling_interval: float = DEFAULT_POLLING_INTERVAL_SECONDS,
        max_polling_time: float = MAX_POLLING_TIME_SECONDS,
    ) -> JobResult:
        """Polls a status URL until the job succeeds or fails"""
        waited = 0.0

        while True:
            data, retry_after = self.transport.poll(status_url)
            job = JobResult.from_api(data)
            if job.is_finished:
                logging.info(
                    "Workflow job finished",
                    extra={"job_id": job.id, "status": job.status.value}
                )
                return job

            delay = retry_after or polling_interval
            if waited + delay > max_polling_time:
                raise PollingTimeout(
                    f"Job {job.id} still {job.status.value} after {waited:.0f}s",
                    status_url=status_url,
                    job_id=job.id
                )

            time.sleep(delay)
            waited += delay

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "CustomWorkflowClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
