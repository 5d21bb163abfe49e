"""Validate-then-submit orchestration."""

import logging
from typing import Any, Callable, Dict, Optional, Protocol
from custom_workflow.domain.models import WorkflowDefinition
from custom_workflow.domain.validation import validate
from custom_workflow.engine.encoder import EncodedRequest, encode


class Transport(Protocol):
    def send(self, request: EncodedRequest) -> str:
        ...


def submit(
    transport: Transport,
    slug: str,
    params: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, Any]] = None,
) -> str:
    """Encodes and dispatches a payload without validating it"""
    return transport.send(encode(slug, params, files))


def validate_and_submit(
    fetch_definition: Callable[[str], WorkflowDefinition],
    transport: Transport,
    slug: str,
    params: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, Any]] = None,
) -> str:
    """Fetches the schema, validates the payload, then submits it.

    ValidationFailed is raised before the transport is touched, so a payload
    the client can reject never reaches the network.
    """
    definition = fetch_definition(slug)
    validate(definition, params, files)

    status_url = submit(transport, slug, params, files)
    logging.info(
        "Workflow submitted",
        extra={"slug": slug, "status_url": status_url}
    )
    return status_url
