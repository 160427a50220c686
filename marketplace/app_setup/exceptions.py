"""
Gestionnaires d’exceptions (utilisés par la factory).
- Toutes les erreurs sont renvoyées sous la forme {"msg": "..."}.
- Erreurs de validation FastAPI -> 400 (au lieu de 422).
- Erreurs non catégorisées -> 500 générique, détail journalisé mais jamais renvoyé.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_as_msg(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_as_400(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"msg": "Invalid request", "errors": jsonable_errors(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"msg": "Server error"})

def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg")}
        for err in exc.errors()
    ]
