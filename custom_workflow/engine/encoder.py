"""Shapes a validated payload into its wire representation."""

import json
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import IO, Any, Dict, Iterator, List, Optional, Tuple
from custom_workflow.domain.files import FileReference, is_present
from custom_workflow.shared.utils import workflow_path

MultipartFile = Tuple[str, Tuple[str, IO[bytes]]]


@dataclass(frozen=True)
class FilePart:
    field_name: str
    file: FileReference

    @property
    def filename(self) -> str:
        return self.file.filename


@dataclass
class EncodedRequest:
    """Transport-ready request: either a JSON body or multipart parts"""
    target: str
    method: str = "POST"
    json_body: Optional[Dict[str, Any]] = None
    text_parts: List[Tuple[str, str]] = field(default_factory=list)
    file_parts: List[FilePart] = field(default_factory=list)

    @property
    def is_multipart(self) -> bool:
        return bool(self.file_parts)

    @contextmanager
    def open_files(self) -> Iterator[List[MultipartFile]]:
        """Opens every file part for streaming; all handles close on exit"""
        with ExitStack() as stack:
            yield [
                (part.field_name, (part.filename, stack.enter_context(part.file.open())))
                for part in self.file_parts
            ]


def encode(
    slug: str,
    params: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, Any]] = None,
) -> EncodedRequest:
    """Builds the request for a workflow run.

    Multipart is chosen whenever file references are present, regardless of
    the workflow's input mode; the payload is assumed to be validated.
    """
    params = params or {}
    target = workflow_path(slug)
    # Empty entries are absent optional files
    files = {name: path for name, path in (files or {}).items() if is_present(path)}

    if not files:
        return EncodedRequest(target=target, json_body=dict(params))

    return EncodedRequest(
        target=target,
        text_parts=[(key, to_form_value(value)) for key, value in params.items()],
        # Each file keeps its caller-supplied field name
        file_parts=[
            FilePart(field_name, FileReference.coerce(path))
            for field_name, path in files.items()
        ],
    )


def to_form_value(value: Any) -> str:
    """Serializes a payload value into a multipart text field.

    Booleans follow the remote API's form convention: "1" for true, "" for false.
    """
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "1" if value else ""
    if value is None:
        return ""
    return str(value)
