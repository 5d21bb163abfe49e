"""Command line harness for the custom workflow client."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple
from custom_workflow.client import CustomWorkflowClient
from custom_workflow.shared.constants import DEFAULT_PAGE, DEFAULT_PER_PAGE
from custom_workflow.shared.exceptions import ValidationFailed, WorkflowClientError
from custom_workflow.shared.logging_config import new_correlation_id, setup_logging


def parse_assignment(raw: str) -> Tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{raw}'")
    return key, value


def parse_param_value(value: str) -> Any:
    """JSON literals are decoded; anything else stays a string"""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def collect_payload(
    assignments: List[Tuple[str, str]],
    file_assignments: List[Tuple[str, str]],
    raw_values: bool = False,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    params = {
        key: value if raw_values else parse_param_value(value)
        for key, value in assignments
    }
    return params, dict(file_assignments)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="custom-workflow", description=__doc__)
    parser.add_argument("--api-key", help="API key (default: $CUSTOM_WORKFLOW_API_KEY)")
    parser.add_argument("--base-url", help="API base URL (default: $CUSTOM_WORKFLOW_BASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List workflows")
    list_cmd.add_argument("--page", type=int, default=DEFAULT_PAGE)
    list_cmd.add_argument("--per-page", type=int, default=DEFAULT_PER_PAGE)

    describe_cmd = sub.add_parser("describe", help="Show a workflow's parameter schema")
    describe_cmd.add_argument("slug")

    validate_cmd = sub.add_parser("validate", help="Validate a payload client-side")
    execute_cmd = sub.add_parser("execute", help="Validate and execute a workflow")
    for cmd in (validate_cmd, execute_cmd):
        cmd.add_argument("slug")
        cmd.add_argument("--param", dest="params", action="append", default=[],
                         type=parse_assignment, metavar="KEY=VALUE")
        cmd.add_argument("--file", dest="files", action="append", default=[],
                         type=parse_assignment, metavar="KEY=PATH")
        cmd.add_argument("--raw", action="store_true",
                         help="Send param values as plain strings")
    execute_cmd.add_argument("--wait", action="store_true", help="Poll until the job finishes")

    results_cmd = sub.add_parser("results", help="Poll a job status URL")
    results_cmd.add_argument("status_url")

    return parser


def run(args: argparse.Namespace, client: CustomWorkflowClient) -> Any:
    if args.command == "list":
        result = client.list_workflows(args.page, args.per_page)
        return result.model_dump(mode="json")

    if args.command == "describe":
        return client.describe_workflow(args.slug).to_dict()

    if args.command == "results":
        return client.fetch_results(args.status_url).model_dump(mode="json")

    params, files = collect_payload(args.params, args.files, args.raw)

    if args.command == "validate":
        client.describe_workflow(args.slug).validate_payload(params, files)
        return {"valid": True}

    status_url = client.validate_and_execute(args.slug, params, files)
    if args.wait:
        return client.fetch_results(status_url).model_dump(mode="json")
    return {"status_url": status_url}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging("custom-workflow-cli", logging.DEBUG if args.verbose else logging.WARNING)
    new_correlation_id()

    try:
        with CustomWorkflowClient(args.api_key, args.base_url) as client:
            output = run(args, client)
    except ValidationFailed as e:
        print(json.dumps({"valid": False, "errors": e.errors}, indent=2))
        return 1
    except (WorkflowClientError, ValueError) as e:
        logging.error("Command failed", extra={"command": args.command, "error": str(e)})
        print(str(e), file=sys.stderr)
        return 2

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
