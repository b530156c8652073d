"""
stack_provisioning.workflow — Start the post-provisioning workflow on stack Create.

The workflow itself is a Step Functions state machine owned by the stack. This
module does not talk to Step Functions directly: it invokes the stack's
companion "Restart-<stack_name>" Lambda, which starts the execution and loops
it up to loop_limit times. The invoke is RequestResponse, so a StatusCode is
always available, but the workflow keeps running after the Restart function
returns.
"""

from __future__ import annotations

import json
from typing import Any

from aws_lambda_powertools import Logger, Tracer
from botocore.exceptions import BotoCoreError, ClientError

from stack_provisioning.exceptions import InvocationError
from stack_provisioning.models import InvocationContext, LifecycleConfig

logger = Logger(service="stack-provisioning-lib")
tracer = Tracer()


class WorkflowStarter:
    """Invokes the Restart function for Create events; a no-op for everything else."""

    def __init__(self, config: LifecycleConfig, *, lambda_client: Any) -> None:
        self._config = config
        self._lambda: Any = lambda_client

    @tracer.capture_method
    def start(self, context: InvocationContext) -> InvocationContext:
        """Ask the Restart function to start the workflow.

        Returns the context unchanged. Raises InvocationError when the invoke
        call fails or the response StatusCode is 300 or above.
        """
        if not context.is_create:
            logger.info(
                "Skipping workflow start for non-Create event",
                request_type=str(context.request_type),
            )
            return context

        function_name = self._config.restart_function_name(context.stack_name)
        payload = context.workflow_payload(self._config.loop_limit)
        logger.info(
            "Invoking restart function",
            function_name=function_name,
            step_function_arn=context.workflow_ref,
            loop_limit=self._config.loop_limit,
        )

        try:
            response = self._lambda.invoke(
                FunctionName=function_name,
                Payload=json.dumps(payload),
            )
        except (ClientError, BotoCoreError) as exc:
            raise InvocationError(function_name) from exc

        status_code = int(response.get("StatusCode", 0))
        if status_code >= 300:
            logger.error(
                "Restart function returned a failure status",
                function_name=function_name,
                status_code=status_code,
            )
            raise InvocationError(function_name, status_code=status_code)

        logger.info(
            "Workflow start requested", function_name=function_name, status_code=status_code
        )
        return context
