from typing import Optional
from supabase import create_client, Client
from marketplace.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def get_supabase() -> Client:
    """
    Client Supabase 'anon' pour les lectures publiques (posts).
    """
    global _supabase
    if _supabase is None:
        if not SUPABASE_URL or not SUPABASE_ANON:
            raise RuntimeError("SUPABASE_URL/SUPABASE_ANON_KEY manquants pour get_supabase()")
        _supabase = create_client(SUPABASE_URL, SUPABASE_ANON)
    return _supabase

def get_service_supabase() -> Client:
    """
    Client service-role (bypass RLS): utilisé pour les users, le ledger et les notifications,
    qui ne sont jamais exposés en lecture directe au client.
    """
    global _service_supabase
    if not SUPABASE_SERVICE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
    if _service_supabase is None:
        _service_supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _service_supabase

def first_row(res) -> Optional[dict]:
    """
    Normalise la réponse PostgREST: renvoie la première ligne (list) ou le dict, sinon None.
    """
    data = getattr(res, "data", None)
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data or None
    return None

def is_unique_violation(exc: Exception) -> bool:
    """Vrai si l'erreur PostgREST correspond à une contrainte d'unicité (SQLSTATE 23505)."""
    code = getattr(exc, "code", None)
    if code == "23505":
        return True
    return "23505" in str(exc) or "duplicate key" in str(exc).lower()

def is_invalid_input(exc: Exception) -> bool:
    """Vrai si PostgREST refuse la valeur filtrée (SQLSTATE 22P02, ex: id qui n'est pas un uuid)."""
    if getattr(exc, "code", None) == "22P02":
        return True
    return "22P02" in str(exc) or "invalid input syntax" in str(exc).lower()
