"""
Stockage local des images d'annonces sous PUBLIC_DIR/uploads.
Le nom de fichier est aléatoire (<epoch-ms>-<9 chiffres><ext>) pour éviter les collisions;
seule l'extension du nom d'origine est conservée.
"""
import os
import secrets
import shutil
import time
from pathlib import Path
from typing import Optional
from fastapi import UploadFile

from marketplace import config

def random_filename(original_name: Optional[str]) -> str:
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"

def save_upload(upload: UploadFile, uploads_dir: Optional[Path] = None) -> str:
    """
    Écrit le fichier reçu et retourne son chemin public (/uploads/<nom>).
    """
    target_dir = Path(uploads_dir or config.UPLOADS_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)
    name = random_filename(upload.filename)
    with open(target_dir / name, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    return f"{config.UPLOADS_URL_PREFIX}/{name}"

def remove_upload(public_path: Optional[str], uploads_dir: Optional[Path] = None) -> bool:
    """Supprime le fichier désigné par save_upload (annonce non créée); False s'il n'existe pas."""
    if not public_path or not public_path.startswith(f"{config.UPLOADS_URL_PREFIX}/"):
        return False
    target = Path(uploads_dir or config.UPLOADS_DIR) / public_path.rsplit("/", 1)[1]
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    return True
