"""Client-side payload validation against a workflow schema.

Mirrors the remote validator so that client-side and server-side rejection
agree field by field.
"""

import logging
from typing import Any, Dict, List, Optional
from custom_workflow.domain.files import FileReference, is_present
from custom_workflow.domain.models import WorkflowDefinition
from custom_workflow.domain.type_classifier import (
    check_json_value,
    is_form_family,
    is_json_family,
)
from custom_workflow.shared.constants import (
    FIELD_REQUIRED,
    FILE_NOT_READABLE,
    FILE_REQUIRED,
    UNKNOWN_PARAMETER,
)
from custom_workflow.shared.exceptions import ValidationFailed
from custom_workflow.shared.types import ParamType

ValidationReport = Dict[str, List[str]]


def validate(
    workflow: WorkflowDefinition,
    params: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, Any]] = None,
) -> ValidationReport:
    """Validates a payload and returns the (empty) report when it conforms.

    Raises ValidationFailed carrying every field error found in one pass.
    """
    params = params or {}
    files = files or {}

    _warn_on_family_mismatch(workflow)

    if workflow.input_mode.is_json:
        errors = validate_json_mode(workflow, params)
    else:
        errors = validate_form_data_mode(workflow, params, files)

    if errors:
        logging.info(
            "Workflow payload rejected",
            extra={"slug": workflow.slug, "invalid_fields": list(errors)}
        )
        raise ValidationFailed(errors, slug=workflow.slug)

    return errors


def validate_json_mode(workflow: WorkflowDefinition, params: Dict[str, Any]) -> ValidationReport:
    errors: ValidationReport = {}

    for param in workflow.params:
        has = param.key in params

        if not has and param.required:
            errors[param.key] = [FIELD_REQUIRED]
            continue

        if has:
            type_error = check_json_value(param.type, params[param.key])
            if type_error is not None:
                errors[param.key] = [type_error]

    # Closed schema: reject extra/unknown parameters
    defined_keys = set(workflow.param_keys())
    for key in params:
        if key not in defined_keys:
            errors[key] = [UNKNOWN_PARAMETER]

    return errors


def validate_form_data_mode(
    workflow: WorkflowDefinition,
    params: Dict[str, Any],
    files: Dict[str, Any],
) -> ValidationReport:
    # Undeclared text fields and files are accepted as-is
    errors: ValidationReport = {}

    for param in workflow.params:
        if param.type == ParamType.FORM_DATA_FILE:
            entry = files.get(param.key)
            if not is_present(entry):
                if param.required:
                    errors[param.key] = [FILE_REQUIRED]
                continue

            file_ref = FileReference.coerce(entry)
            if not file_ref.is_readable():
                errors[param.key] = [FILE_NOT_READABLE.format(path=file_ref.path)]
        else:
            value = params.get(param.key)
            if param.required and (value is None or value == ""):
                errors[param.key] = [FIELD_REQUIRED]

    return errors


def _warn_on_family_mismatch(workflow: WorkflowDefinition) -> None:
    """Logs params whose type family does not match the workflow input mode"""
    belongs = is_json_family if workflow.input_mode.is_json else is_form_family
    mismatched = [p.key for p in workflow.params if not belongs(p.type)]
    if mismatched:
        logging.warning(
            "Workflow declares params outside its input mode family",
            extra={
                "slug": workflow.slug,
                "input_mode": workflow.input_mode.value,
                "params": mismatched
            }
        )
