"""
stack_provisioning — Building blocks for the stack-lifecycle custom resource.

Holds the per-invocation context, the workflow starter, the CloudFormation
callback notifier and the errors they raise. The Lambda entry point in
src/stack_lifecycle wires them together.
"""

from stack_provisioning.callback import CallbackNotifier
from stack_provisioning.exceptions import (
    InvocationError,
    LifecycleError,
    LifecycleEventError,
    NotificationError,
)
from stack_provisioning.models import (
    InvocationContext,
    LifecycleConfig,
    RequestType,
    ResourceStatus,
)
from stack_provisioning.workflow import WorkflowStarter

__all__ = [
    "CallbackNotifier",
    "InvocationContext",
    "InvocationError",
    "LifecycleConfig",
    "LifecycleError",
    "LifecycleEventError",
    "NotificationError",
    "RequestType",
    "ResourceStatus",
    "WorkflowStarter",
]
