"""Workflow schema models built from remote descriptor responses."""

from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator
from custom_workflow.shared.types import InputMode, JobStatus, ParamType


def _unwrap(data: Dict[str, Any]) -> Dict[str, Any]:
    # JSON:API envelope: {"type": "...", "id": "...", "attributes": {...}}
    return data.get("attributes") or data


class WorkflowParam(BaseModel):
    """One declared input slot of a workflow"""
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    label: str
    type: ParamType
    required: bool = False
    default_value: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("label") is None and "key" in data:
            data = {**data, "label": data["key"]}
        return data

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkflowParam":
        attrs = _unwrap(data)
        return cls(
            key=attrs["key"],
            label=attrs.get("label"),
            type=ParamType(attrs["type"]),
            required=bool(attrs.get("required", False)),
            default_value=attrs.get("default_value"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "type": self.type.value,
            "required": self.required,
            "default_value": self.default_value,
        }


class WorkflowDefinition(BaseModel):
    """Full parameter schema of one workflow.

    Constructed once from a describe/list response and never mutated; the
    validator and encoder only read it.
    """
    model_config = ConfigDict(frozen=True)

    slug: str = Field(min_length=1)
    name: str
    description: Optional[str] = None
    input_mode: InputMode
    output_schema: Optional[Any] = None
    is_active: bool = True
    endpoint: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    params: Tuple[WorkflowParam, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _default_endpoint(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("endpoint") and data.get("slug"):
            data = {**data, "endpoint": f"/api/v1/custom/{data['slug']}"}
        return data

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkflowDefinition":
        attrs = _unwrap(data)

        # Params may be nested under attributes or at top level, optionally
        # wrapped in their own {"data": [...]} envelope
        params_raw = attrs.get("params", data.get("params")) or []
        if isinstance(params_raw, dict):
            params_raw = params_raw.get("data", [])

        slug = attrs["slug"]
        return cls(
            slug=slug,
            name=attrs["name"],
            description=attrs.get("description"),
            input_mode=InputMode(attrs["input_mode"]),
            output_schema=attrs.get("output_schema"),
            is_active=bool(attrs.get("is_active", True)),
            endpoint=attrs.get("endpoint"),
            created_at=attrs.get("created_at"),
            updated_at=attrs.get("updated_at"),
            params=tuple(WorkflowParam.from_api(p) for p in params_raw),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "input_mode": self.input_mode.value,
            "output_schema": self.output_schema,
            "is_active": self.is_active,
            "endpoint": self.endpoint,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "params": [p.to_dict() for p in self.params],
        }

    def param_keys(self) -> List[str]:
        return [p.key for p in self.params]

    def required_params(self) -> List[WorkflowParam]:
        return [p for p in self.params if p.required]

    def optional_params(self) -> List[WorkflowParam]:
        return [p for p in self.params if not p.required]

    def validate_payload(
        self,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, List[str]]:
        """Validate a payload against this workflow; raises ValidationFailed"""
        from custom_workflow.domain.validation import validate
        return validate(self, params, files)


class WorkflowListResult(BaseModel):
    """One page of the workflow listing"""
    workflows: List[WorkflowDefinition] = Field(default_factory=list)
    total: Optional[int] = None
    per_page: Optional[int] = None
    current_page: Optional[int] = None
    total_pages: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkflowListResult":
        pagination = (data.get("meta") or {}).get("pagination") or {}
        return cls(
            workflows=[WorkflowDefinition.from_api(item) for item in data.get("data") or []],
            total=pagination.get("total"),
            per_page=pagination.get("per_page"),
            current_page=pagination.get("current_page"),
            total_pages=pagination.get("total_pages"),
        )

    def count(self) -> int:
        return len(self.workflows)

    def is_empty(self) -> bool:
        return not self.workflows


class JobResult(BaseModel):
    """Status of an asynchronous workflow job"""
    id: str
    type: Optional[str] = None
    status: JobStatus
    result: Optional[Any] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "JobResult":
        body = data.get("data", data)
        attrs = _unwrap(body)
        return cls(
            id=str(body.get("id", "")),
            type=attrs.get("type"),
            status=JobStatus(attrs["status"]),
            result=attrs.get("result"),
        )

    @property
    def is_finished(self) -> bool:
        return self.status.is_finished
