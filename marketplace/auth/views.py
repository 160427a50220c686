from fastapi import APIRouter, HTTPException, Depends

from marketplace.utils.rate_limit import optional_rate_limit
from .models import RegisterRequest, LoginRequest
from .service import (
    register as svc_register,
    login as svc_login,
)

# --- API Router (/auth) ---

router = APIRouter(prefix="/auth", tags=["Auth API"])

@router.post("/register", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def api_register(req: RegisterRequest):
    """Inscription (JSON).
    - Délègue la validation (champs, domaine email, unicité) au service.
    - 400 en cas de refus; aucun jeton n'est émis à l'inscription.
    """
    result = svc_register(req.name, req.email, req.password, req.role)
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error or "Registration failed")
    return {"msg": result.message}

@router.post("/login", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def api_login(req: LoginRequest):
    """Connexion (JSON).
    - Erreur générique identique pour email inconnu et mauvais mot de passe.
    - Retourne {token, role, id, name, email, msg}; le client renvoie le jeton dans Authorization.
    """
    result = svc_login(req.email, req.password)
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error or "Invalid email or password")
    user = result.user or {}
    return {
        "token": result.token,
        "role": user.get("role"),
        "id": user.get("id"),
        "name": user.get("name"),
        "email": user.get("email"),
        "msg": result.message,
    }
