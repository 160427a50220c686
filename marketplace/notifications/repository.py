"""
Accès aux données pour l'outbox de notifications (table 'notifications').
"""
from typing import Any, Dict, List, Optional
import logging
import marketplace.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

ADMIN_RECIPIENT = "admin"

# module marketplace.notifications.repository
def insert_notification(*, recipient: str, message: str, meta: Optional[Dict[str, Any]] = None) -> Optional[dict]:
    """
    Ajoute une notification non lue pour un destinataire ('admin', id ou email).
    - Lève l'exception Supabase: l'appelant décide de la politique (best-effort).
    """
    res = (
        supabase_client.get_service_supabase()
        .table("notifications")
        .insert({"recipient": recipient, "message": message, "meta": meta or {}, "read": False})
        .execute()
    )
    return supabase_client.first_row(res) or {"status": "ok"}

def list_for_recipient(recipient: str) -> List[dict]:
    """
    Notifications d'un destinataire (égalité stricte, sans normalisation), plus récentes d'abord.
    """
    res = (
        supabase_client.get_service_supabase()
        .table("notifications")
        .select("*")
        .eq("recipient", recipient)
        .order("created_at", desc=True)
        .execute()
    )
    return res.data or []

def mark_read(notification_id: str) -> Optional[dict]:
    """Passe read=true; None si l'id est inconnu (ou invalide)."""
    if not notification_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("notifications")
            .update({"read": True})
            .eq("id", notification_id)
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception as e:
        if supabase_client.is_invalid_input(e):
            return None
        logger.exception("notifications.repository.mark_read failed id=%s", notification_id)
        raise
