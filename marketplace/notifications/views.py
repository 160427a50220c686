from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException

from marketplace.utils.security import require_admin
from marketplace.notifications import service as notifications_service

router = APIRouter(prefix="/posts/notifications", tags=["Notifications API"])

# module marketplace.notifications.views
@router.get("/admin")
def list_admin_notifications(user: Dict[str, Any] = Depends(require_admin)):
    """Notifications destinées à 'admin', plus récentes d'abord (admin uniquement)."""
    return notifications_service.list_for_admin()

@router.get("/user/{who}")
def list_user_notifications(who: str):
    """
    Notifications d'un destinataire (id utilisateur ou email), correspondance exacte.
    """
    return notifications_service.list_for(who)

@router.post("/{notification_id}/read")
def mark_notification_read(notification_id: str):
    note = notifications_service.mark_read(notification_id)
    if not note:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"msg": "Marked read", "note": note}
