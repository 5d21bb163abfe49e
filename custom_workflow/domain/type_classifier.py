"""Param type families and JSON value conformance checks."""

from typing import Any, Callable, Dict, Optional, Tuple
from collections.abc import Mapping
from custom_workflow.shared.types import ParamType


def is_json_family(param_type: ParamType) -> bool:
    return param_type.is_json_type


def is_form_family(param_type: ParamType) -> bool:
    return param_type.is_form_data_type


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_JSON_CHECKS: Dict[ParamType, Tuple[Callable[[Any], bool], str]] = {
    ParamType.JSON_STRING: (lambda v: isinstance(v, str), "Must be a string"),
    ParamType.JSON_NUMBER: (_is_number, "Must be a number"),
    ParamType.JSON_BOOLEAN: (lambda v: isinstance(v, bool), "Must be a boolean"),
    ParamType.JSON_OBJECT: (lambda v: isinstance(v, Mapping), "Must be an object"),
    ParamType.JSON_ARRAY: (lambda v: isinstance(v, (list, tuple)), "Must be an array"),
}


def check_json_value(param_type: ParamType, value: Any) -> Optional[str]:
    """Returns an error message when value does not match a JSON-family type.

    Types outside the JSON family are not checked here.
    """
    check = _JSON_CHECKS.get(param_type)
    if check is None:
        return None

    predicate, message = check
    return None if predicate(value) else message
