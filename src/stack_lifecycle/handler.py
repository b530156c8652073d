"""
stack_lifecycle.handler — CloudFormation custom resource for stack provisioning.

On Create, asks the stack's Restart-<stack_name> Lambda to start the
post-provisioning Step Functions workflow. On every event, reports SUCCESS or
FAILED to CloudFormation through the pre-signed ResponseURL.

The return value is not read by CloudFormation; the callback is the only
success/failure signal. A failure in the first pass (workflow start or the
first callback) is logged, the status flipped to FAILED and the callback sent
again. A failure in that second callback propagates to the Lambda runtime.
"""

import os
from typing import Any

import boto3
from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from stack_provisioning import (
    CallbackNotifier,
    InvocationContext,
    LifecycleConfig,
    ResourceStatus,
    WorkflowStarter,
)

logger = Logger(service="stack-lifecycle")
tracer = Tracer()

COMPLETION_MARKER = "Done!"

# ---------------------------------------------------------------------------
# Global clients — connection reuse across warm starts
# ---------------------------------------------------------------------------
_lambda_clients: dict[str, Any] = {}


def get_lambda_client(region: str | None = None):
    region = region or os.environ.get("AWS_REGION", "eu-west-2")
    if region not in _lambda_clients:
        _lambda_clients[region] = boto3.client("lambda", region_name=region)
    return _lambda_clients[region]


def build_workflow_starter() -> WorkflowStarter:
    """Read configuration and bind it to a Lambda client for its region."""
    config = LifecycleConfig.from_env()
    return WorkflowStarter(config, lambda_client=get_lambda_client(config.region))


def run_lifecycle(
    context: InvocationContext,
    *,
    notifier: CallbackNotifier,
    starter_factory=build_workflow_starter,
) -> InvocationContext:
    """Start the workflow, then report the outcome. Returns the final context."""
    try:
        starter = starter_factory()
        context = starter.start(context)
        context = notifier.report(context)
    except Exception:
        logger.exception("Lifecycle step failed, reporting FAILED to CloudFormation")
        context = context.with_result(ResourceStatus.FAILED)
        # Not guarded: if this raises, the Lambda invocation fails.
        context = notifier.report(context)
    return context


# Appended keys last for one invocation only
@logger.inject_lambda_context(correlation_id_path="RequestId", clear_state=True)
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> str:
    """Custom resource entry point."""
    logger.info("Lifecycle event received", request_type=event.get("RequestType"))
    invocation = InvocationContext.from_event(event, log_stream_name=context.log_stream_name)

    logger.append_keys(
        stack_name=invocation.stack_name,
        request_type=str(invocation.request_type),
        logical_resource_id=invocation.logical_resource_id,
    )

    invocation = run_lifecycle(invocation, notifier=CallbackNotifier())
    logger.info("Lifecycle event handled", result=str(invocation.result))
    return COMPLETION_MARKER
