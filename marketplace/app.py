# module marketplace.app
from marketplace.app_setup.factory import create_app

# App globale (importée par marketplace.asgi et les tests)
app = create_app()
