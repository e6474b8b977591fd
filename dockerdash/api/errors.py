import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dockerdash.domain.errors import DashboardError
from dockerdash.domain.views import ActionResult

logger = logging.getLogger(__name__)


def error_payload(exc: DashboardError) -> dict:
    payload = {"success": False, "error": exc.message}
    if exc.in_use:
        payload["inUse"] = True
    return payload


def result_response(result: ActionResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.to_payload())


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    logger.warning("[API] %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg", "invalid"))
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "; ".join(problems) or "Invalid request"},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[API] %s %s crashed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc) or "Internal error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DashboardError, dashboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
