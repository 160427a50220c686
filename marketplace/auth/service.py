from typing import Optional, Dict, Any
from datetime import datetime, timezone, timedelta
import logging
import bcrypt
import jwt

from marketplace import config
from marketplace.auth.models import AuthResponse, build_user_dict, handle_exception
from marketplace.infra.supabase_client import is_unique_violation
from marketplace.utils.validators import is_allowed_email
from .repository import (
    get_user_by_email,
    insert_user,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
# Limite de bcrypt: au-delà, hashpw lève ValueError
MAX_PASSWORD_BYTES = 72

def determine_role(requested: Optional[str]) -> str:
    """Rôle fixé à la création: 'admin' uniquement si demandé explicitement, sinon 'user'."""
    if str(requested or "").strip().lower() == "admin":
        return "admin"
    return "user"

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Hash corrompu/inconnu: traité comme un mot de passe invalide
        return False

# --- Jetons (JWT) ---

def issue_token(user_id: str, role: str, now: Optional[datetime] = None) -> str:
    """Signe un jeton {id, role, iat[, exp]}.
    - exp n'est posé que si JWT_TTL_SECONDS > 0
    """
    if not config.JWT_SECRET:
        raise RuntimeError("JWT_SECRET manquant")
    issued_at = now or datetime.now(timezone.utc)
    payload: Dict[str, Any] = {"id": str(user_id), "role": role, "iat": issued_at}
    if config.JWT_TTL_SECONDS > 0:
        payload["exp"] = issued_at + timedelta(seconds=config.JWT_TTL_SECONDS)
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

def decode_token(token: str) -> Dict[str, Any]:
    """Vérifie signature (et expiration si présente) et renvoie {id, role}.
    Lève jwt.InvalidTokenError si le jeton est invalide.
    """
    if not config.JWT_SECRET:
        raise jwt.InvalidTokenError("JWT_SECRET manquant")
    claims = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    if not claims.get("id"):
        raise jwt.InvalidTokenError("id manquant")
    return {"id": str(claims["id"]), "role": claims.get("role") or "user"}

# --- Cas d’usage Auth exposés ---

def register(name: Optional[str], email: Optional[str], password: Optional[str], role: Optional[str] = None) -> AuthResponse:
    """Inscription:
    - Champs name/email/password obligatoires
    - Email limité au domaine ALLOWED_EMAIL_DOMAIN
    - Refus si l'email existe déjà (vérification + contrainte d'unicité côté base)
    - Mot de passe stocké uniquement sous forme de hash bcrypt (72 octets max)
    - Ne renvoie aucun jeton
    """
    name = (name or "").strip()
    email = (email or "").strip()
    if not name or not email or not password:
        return AuthResponse(False, error="Missing fields")
    if not is_allowed_email(email, config.ALLOWED_EMAIL_DOMAIN):
        return AuthResponse(False, error=f"Registration requires a @{config.ALLOWED_EMAIL_DOMAIN} email")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return AuthResponse(False, error=f"Password too long (max {MAX_PASSWORD_BYTES} bytes)")

    try:
        if get_user_by_email(email):
            return AuthResponse(False, error="Email already registered")
        insert_user({
            "name": name,
            "email": email,
            "password_hash": hash_password(password),
            "role": determine_role(role),
        })
        logger.info("auth.register created email=%s", email)
        return AuthResponse(True, message="Registered successfully")
    except Exception as e:
        if is_unique_violation(e):
            return AuthResponse(False, error="Email already registered")
        return handle_exception("register", e)

def login(email: Optional[str], password: Optional[str]) -> AuthResponse:
    """Connexion:
    - Champs manquants => 400
    - Email inconnu et mauvais mot de passe => même message générique
    - Succès: jeton signé {id, role} + profil public
    """
    email = (email or "").strip()
    if not email or not password:
        return AuthResponse(False, error="Missing fields")
    try:
        row = get_user_by_email(email)
        if not row or not verify_password(password, row.get("password_hash")):
            return AuthResponse(False, error=INVALID_CREDENTIALS)
        user = build_user_dict(row)
        token = issue_token(user["id"], user["role"])
        return AuthResponse(True, user=user, token=token, message="Login successful")
    except Exception as e:
        return handle_exception("login", e)
