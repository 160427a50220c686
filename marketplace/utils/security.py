from fastapi import Request, HTTPException, Depends
from typing import Optional, Dict, Any

def get_token_from_request(request: Request) -> Optional[str]:
    # Accepte "Bearer <jeton>" ou le jeton brut dans Authorization
    auth_header = (request.headers.get("Authorization") or "").strip()
    if auth_header.lower().startswith("bearer "):
        auth_header = auth_header[7:].strip()
    return auth_header or None

def get_current_user(request: Request) -> Dict[str, Any]:
    token = get_token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authorized")

    try:
        # Délégué au service Auth
        from marketplace.auth.service import decode_token as _svc_decode_token
        return _svc_decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admins only")
    return user
