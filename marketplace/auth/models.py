from typing import Optional, Dict, Any
import logging
from pydantic import BaseModel

logger = logging.getLogger(__name__)

class RegisterRequest(BaseModel):
    # Champs optionnels: la validation métier (400 "Missing fields") est faite par le service
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class AuthResponse:
    def __init__(
        self,
        success: bool,
        user: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        error: Optional[str] = None,
        message: Optional[str] = None,
        status_code: int = 400,
    ):
        self.success = success
        self.user = user
        self.token = token
        self.error = error
        self.message = message
        self.status_code = status_code

    @property
    def role(self) -> Optional[str]:
        return (self.user or {}).get("role")

def build_user_dict(row: Dict[str, Any]) -> Dict[str, Any]:
    """Profil public d'un utilisateur (jamais le hash du mot de passe)."""
    return {
        "id": str(row.get("id")) if row.get("id") is not None else None,
        "name": row.get("name"),
        "email": row.get("email"),
        "role": row.get("role") or "user",
    }

def handle_exception(action: str, e: Exception) -> AuthResponse:
    logger.exception(f"Erreur {action}")
    return AuthResponse(False, error="Server error", status_code=500)
