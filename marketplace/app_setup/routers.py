"""
Registre central des routers (auth, notifications, paiements, annonces, health).
"""
from fastapi import FastAPI
from marketplace.auth.views import router as auth_router
from marketplace.notifications.views import router as notifications_router
from marketplace.payments.views import router as payments_router
from marketplace.posts.views import router as posts_router
from marketplace.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l’application.
    - /posts/notifications/* et /posts/confirm-payment sont enregistrés avant /posts/{post_id}.
    """
    app.include_router(auth_router)
    app.include_router(notifications_router)
    app.include_router(payments_router)
    app.include_router(posts_router)
    app.include_router(health_router)
