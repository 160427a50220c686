"""
Routes simples (hors routers): racine du site (cible du cancel_url Stripe),
page de succès du checkout et favicon.
"""
from fastapi import FastAPI
from fastapi.responses import FileResponse, JSONResponse, Response
from starlette.status import HTTP_204_NO_CONTENT
from marketplace.config import PUBLIC_DIR

def _public_page(name: str, fallback: dict):
    path = PUBLIC_DIR / name
    if path.exists():
        return FileResponse(str(path))
    return JSONResponse(fallback)

def register_routes(app: FastAPI) -> None:
    @app.get("/", include_in_schema=False)
    def root():
        return _public_page("index.html", {"ok": True, "service": app.title})

    @app.get("/payment-success.html", include_in_schema=False)
    def payment_success(session_id: str = ""):
        # Le front lit session_id puis appelle POST /posts/confirm-payment
        return _public_page("payment-success.html", {"sessionId": session_id})

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
