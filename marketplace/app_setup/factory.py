"""
Factory d’application utilisée par les entrypoints (marketplace.asgi, python -m marketplace).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware
from .static import mount_static_files
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - middlewares de base et en-têtes de sécurité
      - fichiers statiques (/uploads, /public)
      - gestionnaires d’exceptions ({"msg": ...}) et routes simples
      - tous les routers (auth, posts, paiements, notifications, health)
    """
    app = FastAPI(title="Marketplace API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    mount_static_files(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
