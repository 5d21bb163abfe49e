"""Shared enumerations for workflow schemas and job status."""

from enum import Enum


class ParamType(str, Enum):
    FORM_DATA_TEXT = "form_data_text"
    FORM_DATA_FILE = "form_data_file"
    JSON_STRING = "json_string"
    JSON_NUMBER = "json_number"
    JSON_OBJECT = "json_object"
    JSON_ARRAY = "json_array"
    JSON_BOOLEAN = "json_boolean"

    @property
    def label(self) -> str:
        return _PARAM_TYPE_LABELS[self]

    @property
    def is_json_type(self) -> bool:
        return self in JSON_PARAM_TYPES

    @property
    def is_form_data_type(self) -> bool:
        return self in FORM_DATA_PARAM_TYPES


_PARAM_TYPE_LABELS = {
    ParamType.FORM_DATA_TEXT: "Form-Data Text",
    ParamType.FORM_DATA_FILE: "Form-Data File",
    ParamType.JSON_STRING: "JSON String",
    ParamType.JSON_NUMBER: "JSON Number",
    ParamType.JSON_BOOLEAN: "JSON Boolean",
    ParamType.JSON_OBJECT: "JSON Object",
    ParamType.JSON_ARRAY: "JSON Array",
}

JSON_PARAM_TYPES = frozenset({
    ParamType.JSON_STRING,
    ParamType.JSON_NUMBER,
    ParamType.JSON_BOOLEAN,
    ParamType.JSON_OBJECT,
    ParamType.JSON_ARRAY,
})

FORM_DATA_PARAM_TYPES = frozenset({
    ParamType.FORM_DATA_TEXT,
    ParamType.FORM_DATA_FILE,
})


class InputMode(str, Enum):
    JSON = "application/json"
    FORM_DATA = "multipart/form-data"

    @property
    def label(self) -> str:
        return "JSON" if self is InputMode.JSON else "Form-Data"

    @property
    def is_json(self) -> bool:
        return self is InputMode.JSON

    @property
    def is_form_data(self) -> bool:
        return self is InputMode.FORM_DATA


class JobStatus(str, Enum):
    NEW = "new"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_finished(self) -> bool:
        return self in (JobStatus.SUCCESS, JobStatus.FAILED)
