#!/usr/bin/env python3
"""
dev-invoke.py — Run the stack-lifecycle handler locally against a sample event.

Builds a CloudFormation custom-resource event and runs it through the same
code path as the deployed Lambda. Point --callback-url at the mock callback
receiver (tests/mocks/mock_callback) to inspect the response document.

Create events invoke the real Restart-<stack_name> Lambda in AWS_REGION;
use --request-type Update or Delete to exercise the callback path only.

Usage:
    uv run uvicorn tests.mocks.mock_callback.main:app --port 8767
    uv run python scripts/dev-invoke.py \\
        --request-type Update \\
        --stack-name orders \\
        [--step-function-arn <arn>] \\
        [--callback-url http://localhost:8767/callback/<request_id>] \\
        [--loop-limit 10]
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import uuid
from pathlib import Path
from typing import Any

_REPO_ROOT = Path(__file__).resolve().parents[1]
for _path in (_REPO_ROOT, _REPO_ROOT / "src" / "provisioning-lib" / "src"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from src.stack_lifecycle.handler import COMPLETION_MARKER, run_lifecycle  # noqa: E402
from stack_provisioning import CallbackNotifier, InvocationContext, LifecycleError  # noqa: E402

DEFAULT_CALLBACK_BASE = "http://localhost:8767/callback"
DEFAULT_ACCOUNT_ID = "111111111111"


def build_event(
    *,
    request_type: str,
    stack_name: str,
    step_function_arn: str,
    callback_url: str,
    request_id: str,
    region: str,
) -> dict[str, Any]:
    """Sample event in the shape CloudFormation sends to a custom resource."""
    return {
        "RequestType": request_type,
        "ServiceToken": f"arn:aws:lambda:{region}:{DEFAULT_ACCOUNT_ID}:function:stack-lifecycle",
        "ResponseURL": callback_url,
        "StackId": f"arn:aws:cloudformation:{region}:{DEFAULT_ACCOUNT_ID}:stack/{stack_name}/local",
        "RequestId": request_id,
        "LogicalResourceId": "StartWorkflow",
        "ResourceType": "Custom::StartWorkflow",
        "ResourceProperties": {
            "step_function_arn": step_function_arn,
            "stack_name": stack_name,
        },
    }


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--request-type",
        choices=["Create", "Update", "Delete"],
        default="Update",
        help="CloudFormation RequestType (default Update, which skips the workflow start)",
    )
    parser.add_argument("--stack-name", default="local-stack", help="Owning stack name")
    parser.add_argument(
        "--step-function-arn",
        default=None,
        help="State machine ARN passed to the Restart function",
    )
    parser.add_argument(
        "--callback-url",
        default=None,
        help=f"ResponseURL to PUT the status to (default {DEFAULT_CALLBACK_BASE}/<request_id>)",
    )
    parser.add_argument("--loop-limit", default=None, help="Overrides LOOP_LIMIT")
    parser.add_argument(
        "--log-stream", default="local/dev-invoke", help="Log stream name to report"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    region = os.environ.get("AWS_REGION", "eu-west-2")
    if args.loop_limit is not None:
        os.environ["LOOP_LIMIT"] = args.loop_limit

    request_id = str(uuid.uuid4())
    step_function_arn = args.step_function_arn or (
        f"arn:aws:states:{region}:{DEFAULT_ACCOUNT_ID}:stateMachine:{args.stack_name}"
    )
    event = build_event(
        request_type=args.request_type,
        stack_name=args.stack_name,
        step_function_arn=step_function_arn,
        callback_url=args.callback_url or f"{DEFAULT_CALLBACK_BASE}/{request_id}",
        request_id=request_id,
        region=region,
    )
    print(json.dumps(event, indent=2))

    try:
        context = InvocationContext.from_event(event, log_stream_name=args.log_stream)
        final = run_lifecycle(context, notifier=CallbackNotifier())
    except LifecycleError as exc:
        print(f"Lifecycle run failed: {exc}", file=sys.stderr)
        return 1

    print(f"result={final.result}")
    print(COMPLETION_MARKER)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
