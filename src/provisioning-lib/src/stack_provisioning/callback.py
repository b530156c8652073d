"""
stack_provisioning.callback — Report the custom resource outcome to CloudFormation.

CloudFormation hands every custom resource a pre-signed S3 ResponseURL. The
signature covers an empty Content-Type, so the PUT must send the header with
an empty value or S3 rejects the request with 403.
"""

from __future__ import annotations

import json
from typing import Any

import requests
from aws_lambda_powertools import Logger, Tracer

from stack_provisioning.exceptions import NotificationError
from stack_provisioning.models import InvocationContext

logger = Logger(service="stack-provisioning-lib")
tracer = Tracer()

CALLBACK_HEADERS = {"content-type": ""}


class CallbackNotifier:
    """Sends the terminal status document to the context's callback URL."""

    def __init__(self, *, session: Any = None) -> None:
        # requests module and requests.Session share the put() signature
        self._http: Any = session or requests

    @tracer.capture_method
    def report(self, context: InvocationContext) -> InvocationContext:
        """PUT the response document for context.result.

        Returns the context unchanged. Raises NotificationError on transport
        failure or when the endpoint answers with status 300 or above.
        """
        body = json.dumps(context.callback_body())
        logger.info("Notifying CloudFormation", status=str(context.result))

        try:
            response = self._http.put(context.callback_url, headers=CALLBACK_HEADERS, data=body)
        except requests.RequestException as exc:
            raise NotificationError(context.callback_url) from exc

        if response.status_code >= 300:
            logger.error(
                "CloudFormation callback rejected",
                status_code=response.status_code,
                status=str(context.result),
            )
            raise NotificationError(context.callback_url, status_code=response.status_code)

        logger.info(
            "CloudFormation notified",
            status=str(context.result),
            status_code=response.status_code,
        )
        return context
