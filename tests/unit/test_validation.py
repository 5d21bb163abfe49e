"""
Unit tests for client-side payload validation.
"""

import logging
import pytest
from custom_workflow.domain.files import FileReference
from custom_workflow.domain.models import WorkflowDefinition
from custom_workflow.domain.validation import validate
from custom_workflow.shared.exceptions import ValidationFailed


def build_json_workflow(params):
    return WorkflowDefinition.from_api({
        "slug": "test",
        "name": "Test",
        "input_mode": "application/json",
        "is_active": True,
        "params": {"data": params},
    })


def build_form_data_workflow(params):
    return WorkflowDefinition.from_api({
        "slug": "test",
        "name": "Test",
        "input_mode": "multipart/form-data",
        "is_active": True,
        "params": {"data": params},
    })


def errors_for(workflow, params=None, files=None):
    with pytest.raises(ValidationFailed) as exc_info:
        validate(workflow, params, files)
    return exc_info.value.errors


# -- JSON mode: required fields --

def test_json_required_fields_present():
    """Conforming payload returns an empty report"""
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
    ])

    assert validate(workflow, {"text": "hello"}) == {}


def test_json_required_field_missing():
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
    ])

    assert errors_for(workflow, {}) == {"text": ["Field is required"]}


def test_json_optional_field_missing_is_fine():
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
        {"key": "context", "type": "json_string", "required": False},
    ])

    assert validate(workflow, {"text": "hello"}) == {}


def test_json_missing_required_skips_type_check():
    """A missing field reports only that it is required"""
    workflow = build_json_workflow([
        {"key": "count", "type": "json_number", "required": True},
    ])

    assert errors_for(workflow, {}) == {"count": ["Field is required"]}


# -- JSON mode: type checks --

def test_json_string_type():
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
    ])

    assert errors_for(workflow, {"text": 123}) == {"text": ["Must be a string"]}


def test_json_number_accepts_int_and_float():
    workflow = build_json_workflow([
        {"key": "count", "type": "json_number", "required": True},
    ])

    assert validate(workflow, {"count": 42}) == {}
    assert validate(workflow, {"count": 3.14}) == {}


def test_json_number_rejects_numeric_string():
    """Numeric strings are never coerced"""
    workflow = build_json_workflow([
        {"key": "count", "type": "json_number", "required": True},
    ])

    assert errors_for(workflow, {"count": "42"}) == {"count": ["Must be a number"]}


def test_json_boolean_rejects_string():
    workflow = build_json_workflow([
        {"key": "active", "type": "json_boolean", "required": True},
    ])

    assert validate(workflow, {"active": True}) == {}
    assert errors_for(workflow, {"active": "true"}) == {"active": ["Must be a boolean"]}


def test_json_object_rejects_list():
    workflow = build_json_workflow([
        {"key": "meta", "type": "json_object", "required": True},
    ])

    assert validate(workflow, {"meta": {"key": "value"}}) == {}
    assert errors_for(workflow, {"meta": ["a", "b"]}) == {"meta": ["Must be an object"]}


def test_json_array_rejects_object():
    workflow = build_json_workflow([
        {"key": "items", "type": "json_array", "required": True},
    ])

    assert validate(workflow, {"items": ["a", "b"]}) == {}
    assert errors_for(workflow, {"items": {"k": "v"}}) == {"items": ["Must be an array"]}


def test_json_optional_field_still_type_checked():
    workflow = build_json_workflow([
        {"key": "limit", "type": "json_number", "required": False},
    ])

    assert errors_for(workflow, {"limit": "ten"}) == {"limit": ["Must be a number"]}


# -- JSON mode: extra params --

def test_json_rejects_unknown_parameters():
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
    ])

    assert errors_for(workflow, {"text": "hi", "extra": "x"}) == {"extra": ["Unknown parameter"]}


def test_json_collects_every_error_in_order():
    """Declared params come first in declaration order, then unknown keys in payload order"""
    workflow = build_json_workflow([
        {"key": "a", "type": "json_string", "required": True},
        {"key": "b", "type": "json_number", "required": True},
        {"key": "c", "type": "json_boolean", "required": True},
    ])

    errors = errors_for(workflow, {"zeta": 1, "c": "yes", "alpha": 2, "b": 5})

    assert list(errors) == ["a", "c", "zeta", "alpha"]
    assert errors == {
        "a": ["Field is required"],
        "c": ["Must be a boolean"],
        "zeta": ["Unknown parameter"],
        "alpha": ["Unknown parameter"],
    }


def test_validation_failed_message():
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
    ])

    with pytest.raises(ValidationFailed, match="Validation failed: text: Field is required; extra: Unknown parameter"):
        validate(workflow, {"extra": "bad"})


def test_validation_is_idempotent():
    """Same schema and payload yield identical reports"""
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
        {"key": "count", "type": "json_number", "required": True},
    ])
    payload = {"count": "1", "bogus": True}

    first = errors_for(workflow, payload)
    second = errors_for(workflow, payload)

    assert first == second
    assert list(first) == list(second)
    assert payload == {"count": "1", "bogus": True}


def test_definition_validate_payload_delegates():
    workflow = build_json_workflow([
        {"key": "text", "type": "json_string", "required": True},
    ])

    with pytest.raises(ValidationFailed):
        workflow.validate_payload({})


def test_family_mismatch_is_permissive_but_logged(caplog):
    """A form-file param in a JSON workflow is not type checked"""
    workflow = build_json_workflow([
        {"key": "document", "type": "form_data_file", "required": False},
    ])

    with caplog.at_level(logging.WARNING):
        assert validate(workflow, {"document": 12}) == {}

    assert "outside its input mode family" in caplog.text


# -- Form-data mode --

def test_form_data_required_text_present():
    workflow = build_form_data_workflow([
        {"key": "description", "type": "form_data_text", "required": True},
    ])

    assert validate(workflow, {"description": "A document"}) == {}


def test_form_data_required_text_missing_or_empty():
    workflow = build_form_data_workflow([
        {"key": "description", "type": "form_data_text", "required": True},
    ])

    assert errors_for(workflow, {}) == {"description": ["Field is required"]}
    assert errors_for(workflow, {"description": ""}) == {"description": ["Field is required"]}


def test_form_data_never_reports_unknown_parameters():
    """Extra text fields and files are accepted in form-data mode"""
    workflow = build_form_data_workflow([
        {"key": "description", "type": "form_data_text", "required": True},
    ])

    assert validate(workflow, {"description": "x", "bogus": "y"}, {"stray": "/nonexistent"}) == {}


def test_form_data_required_file_missing():
    workflow = build_form_data_workflow([
        {"key": "document", "type": "form_data_file", "required": True},
    ])

    assert errors_for(workflow, {}, {}) == {"document": ["File is required"]}
    assert errors_for(workflow, {}, {"document": ""}) == {"document": ["File is required"]}


def test_form_data_optional_file_missing():
    workflow = build_form_data_workflow([
        {"key": "attachment", "type": "form_data_file", "required": False},
    ])

    assert validate(workflow, {}, {}) == {}


def test_form_data_file_present_and_readable(tmp_path):
    document = tmp_path / "report.pdf"
    document.write_bytes(b"%PDF-1.4")
    workflow = build_form_data_workflow([
        {"key": "document", "type": "form_data_file", "required": True},
    ])

    assert validate(workflow, {}, {"document": str(document)}) == {}
    assert validate(workflow, {}, {"document": document}) == {}
    assert validate(workflow, {}, {"document": FileReference(str(document))}) == {}


def test_form_data_file_unreadable(tmp_path):
    """Unreadable files are reported with their path"""
    missing = tmp_path / "missing.pdf"
    workflow = build_form_data_workflow([
        {"key": "document", "type": "form_data_file", "required": True},
    ])

    errors = errors_for(workflow, {}, {"document": str(missing)})

    assert errors == {"document": [f"File is not readable: {missing}"]}


def test_form_data_collects_text_and_file_errors(tmp_path):
    workflow = build_form_data_workflow([
        {"key": "document", "type": "form_data_file", "required": True},
        {"key": "description", "type": "form_data_text", "required": True},
        {"key": "notes", "type": "form_data_text", "required": False},
    ])

    errors = errors_for(workflow, {"notes": ""}, {})

    assert errors == {
        "document": ["File is required"],
        "description": ["Field is required"],
    }
