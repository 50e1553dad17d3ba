"""
Schema extension logging each GraphQL operation with its outcome.
"""

import time

import structlog
from strawberry.extensions import SchemaExtension

from app.core.logging import get_logger
from app.core.metrics import record_operation

logger = get_logger(__name__)

IGNORED_OPERATIONS = {"IntrospectionQuery"}


class OperationLogging(SchemaExtension):
    def on_operation(self):
        start_time = time.perf_counter()

        yield

        # The operation name is only known once the document is parsed
        operation_name = self.execution_context.operation_name or "anonymous"
        structlog.contextvars.bind_contextvars(graphql_operation=operation_name)
        if operation_name in IGNORED_OPERATIONS:
            return

        result = self.execution_context.result
        errors = getattr(result, "errors", None) or getattr(self.execution_context, "errors", None) or []
        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        record_operation(operation_name, success=not errors)

        if errors:
            codes = sorted({(error.extensions or {}).get("code", "INTERNAL_SERVER_ERROR") for error in errors})
            logger.info("graphql_operation_failed", error_codes=codes, duration_ms=duration_ms)
        else:
            logger.info("graphql_operation_completed", duration_ms=duration_ms)
