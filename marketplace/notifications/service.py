# module marketplace.notifications.service

from typing import Any, Dict, List, Optional
import logging
from marketplace.notifications import repository as notifications_repository
from marketplace.notifications.repository import ADMIN_RECIPIENT

logger = logging.getLogger(__name__)

def list_for_admin() -> List[dict]:
    return notifications_repository.list_for_recipient(ADMIN_RECIPIENT)

def list_for(who: str) -> List[dict]:
    return notifications_repository.list_for_recipient(who)

def mark_read(notification_id: str) -> Optional[dict]:
    return notifications_repository.mark_read(notification_id)

def buyer_recipient(buyer_id: Optional[str], buyer_email: Optional[str]) -> str:
    return buyer_id or buyer_email or "unknown"

def notify_purchase(
    *,
    post: Dict[str, Any],
    payment_id: Any,
    buyer_id: Optional[str],
    buyer_name: Optional[str],
    buyer_email: Optional[str],
    quantity: int,
    amount: float,
) -> int:
    """
    Écrit la notification admin puis la notification acheteur pour un paiement enregistré.
    - Chaque écriture est indépendante; un échec est journalisé avec l'id du paiement
      sans annuler le paiement déjà inscrit au ledger.
    - Retourne le nombre de notifications effectivement écrites (0..2).
    """
    post_id = str(post.get("id"))
    title = post.get("title") or ""
    notes = [
        (
            ADMIN_RECIPIENT,
            f"Payment received for {title}",
            {
                "postId": post_id,
                "buyerId": buyer_id,
                "buyerName": buyer_name,
                "buyerEmail": buyer_email,
                "quantity": quantity,
                "amount": amount,
            },
        ),
        (
            buyer_recipient(buyer_id, buyer_email),
            f"Payment successful for {title}",
            {"postId": post_id, "quantity": quantity, "amount": amount},
        ),
    ]
    written = 0
    for recipient, message, meta in notes:
        try:
            notifications_repository.insert_notification(recipient=recipient, message=message, meta=meta)
            written += 1
        except Exception:
            logger.exception(
                "notifications.service.notify_purchase lost notification payment_id=%s recipient=%s",
                payment_id,
                recipient,
            )
    return written
