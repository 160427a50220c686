"""
Montage des fichiers statiques.
Expose:
- /uploads -> images d'annonces (noms aléatoires)
- /public -> tout le répertoire public
"""
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from marketplace.config import PUBLIC_DIR, UPLOADS_DIR, UPLOADS_URL_PREFIX

def mount_static_files(app: FastAPI) -> None:
    UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")
    app.mount("/public", StaticFiles(directory=str(PUBLIC_DIR)), name="public")
