"""Accès aux données (Supabase) pour le domaine Identité (table users).
Toutes les erreurs Supabase remontent: le service distingue la contrainte d'unicité
sur email (23505) d'une panne (500).
"""
from typing import Any, Dict, Optional
import logging
import marketplace.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, password_hash, role, created_at"

# module marketplace.auth.repository
def get_user_by_email(email: str) -> Optional[dict]:
    """Récupère un utilisateur par email (correspondance exacte).
    - Retour: dict utilisateur (avec password_hash) ou None si introuvable
    - Les erreurs Supabase remontent (panne != compte inexistant)
    """
    if not email:
        return None
    res = (
        supabase_client.get_service_supabase()
        .table("users")
        .select(USER_COLUMNS)
        .eq("email", email)
        .limit(1)
        .execute()
    )
    return supabase_client.first_row(res)

def insert_user(data: Dict[str, Any]) -> Optional[dict]:
    """Insère un utilisateur (service-role).
    - data: {name, email, password_hash, role}
    - Lève l'exception PostgREST telle quelle (ex: 23505 si l'email existe déjà)
    """
    res = supabase_client.get_service_supabase().table("users").insert(data).execute()
    return supabase_client.first_row(res) or {"status": "ok"}
