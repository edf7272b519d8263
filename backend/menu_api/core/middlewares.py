"""
Request middlewares for the FastAPI application.
"""

import uuid

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.logging import bind_request_context, reset_request_context


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind request id and tenant to the logging context.

    - X-Request-ID is reused when sent, generated otherwise, and echoed
      on the response
    - X-Tenant-ID is recorded as sent; non-numeric values are left to the
      tenant dependency to reject
    """

    REQUEST_ID_HEADER = "X-Request-ID"
    TENANT_HEADER = "X-Tenant-ID"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.REQUEST_ID_HEADER) or str(uuid.uuid4())
        tenant = request.headers.get(self.TENANT_HEADER, "")
        tenant_id = int(tenant) if tenant.isdigit() else None

        tokens = bind_request_context(request_id, tenant_id)
        try:
            request.state.request_id = request_id
            response = await call_next(request)
        finally:
            reset_request_context(tokens)

        response.headers[self.REQUEST_ID_HEADER] = request_id
        return response


def register_middlewares(app: FastAPI) -> None:
    app.add_middleware(RequestContextMiddleware)
