"""
stack_provisioning.models — Per-invocation context and process configuration.

InvocationContext is built once from the CloudFormation custom-resource event
and discarded when the handler returns. It is frozen: a step that changes the
outcome returns a copy via with_result() rather than mutating shared state.

The callback body layout follows the CloudFormation custom resource response
object: Status, Reason, PhysicalResourceId, StackId, RequestId,
LogicalResourceId, NoEcho, Data.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from aws_lambda_powertools.utilities.data_classes import CloudFormationCustomResourceEvent

from stack_provisioning.exceptions import LifecycleEventError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_REGION: str = "eu-west-2"
DEFAULT_RESTART_FUNCTION_PREFIX: str = "Restart-"
INITIAL_LOOP_COUNT: int = 0
REASON_PREFIX: str = "See the details in CloudWatch Log Stream: "


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RequestType(StrEnum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResourceStatus(StrEnum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LifecycleConfig:
    """Process-wide settings, read from the environment on each invocation.

    loop_limit is the raw LOOP_LIMIT string, forwarded untouched to the Restart
    function. When LOOP_LIMIT is unset the key is left out of the invoke payload.
    """

    region: str = DEFAULT_REGION
    loop_limit: str | None = None
    restart_function_prefix: str = DEFAULT_RESTART_FUNCTION_PREFIX

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LifecycleConfig:
        env = os.environ if environ is None else environ
        return cls(
            region=env.get("AWS_REGION") or DEFAULT_REGION,
            loop_limit=env.get("LOOP_LIMIT"),
            restart_function_prefix=env.get(
                "RESTART_FUNCTION_PREFIX", DEFAULT_RESTART_FUNCTION_PREFIX
            ),
        )

    def restart_function_name(self, stack_name: str) -> str:
        return f"{self.restart_function_prefix}{stack_name}"


# ---------------------------------------------------------------------------
# InvocationContext
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvocationContext:
    """Everything one lifecycle event needs to start the workflow and answer CloudFormation.

    result starts as SUCCESS. The handler's error path is the only place that
    replaces it with FAILED; nothing switches it back.
    """

    log_stream_name: str
    stack_id: str
    request_id: str
    request_type: RequestType | str  # unrecognised values are kept as-is
    logical_resource_id: str
    workflow_ref: str  # ResourceProperties.step_function_arn
    stack_name: str
    callback_url: str  # pre-signed, single use
    result: ResourceStatus = ResourceStatus.SUCCESS

    @classmethod
    def from_event(cls, event: dict[str, Any], *, log_stream_name: str) -> InvocationContext:
        """Build a context from a raw CloudFormation custom-resource event.

        Only ResponseURL, without which there is nowhere to report, and the
        ResourceProperties object are required. Any other missing field becomes
        "" so an incomplete Update or Delete still reports; an incomplete Create
        is left to the Restart invoke to reject.
        """
        cfn_event = CloudFormationCustomResourceEvent(event)

        missing: list[str] = []
        if not cfn_event.get("ResponseURL"):
            missing.append("ResponseURL")
        if cfn_event.get("ResourceProperties") is None:
            missing.append("ResourceProperties")
        if missing:
            raise LifecycleEventError(
                f"Event is missing required fields: {', '.join(missing)}",
                missing=tuple(missing),
            )
        properties = cfn_event["ResourceProperties"]

        raw_request_type = str(cfn_event.get("RequestType") or "")
        try:
            request_type: RequestType | str = RequestType(raw_request_type)
        except ValueError:
            request_type = raw_request_type

        return cls(
            log_stream_name=log_stream_name,
            stack_id=str(cfn_event.get("StackId") or ""),
            request_id=str(cfn_event.get("RequestId") or ""),
            request_type=request_type,
            logical_resource_id=str(cfn_event.get("LogicalResourceId") or ""),
            workflow_ref=str(properties.get("step_function_arn") or ""),
            stack_name=str(properties.get("stack_name") or ""),
            callback_url=str(cfn_event["ResponseURL"]),
        )

    @property
    def is_create(self) -> bool:
        return self.request_type == RequestType.CREATE

    def with_result(self, result: ResourceStatus) -> InvocationContext:
        return dataclasses.replace(self, result=result)

    def workflow_payload(self, loop_limit: str | None) -> dict[str, Any]:
        """Payload sent to the Restart function; loop_count always starts at zero."""
        payload: dict[str, Any] = {
            "step_function_arn": self.workflow_ref,
            "loop_count": INITIAL_LOOP_COUNT,
        }
        if loop_limit is not None:
            payload["loop_limit"] = loop_limit
        return payload

    def callback_body(self) -> dict[str, Any]:
        """CloudFormation custom resource response document."""
        return {
            "Status": str(self.result),
            "Reason": f"{REASON_PREFIX}{self.log_stream_name}",
            "PhysicalResourceId": self.log_stream_name,
            "StackId": self.stack_id,
            "RequestId": self.request_id,
            "LogicalResourceId": self.logical_resource_id,
            "NoEcho": False,
            "Data": {},
        }
