"""
Sérialisation/désérialisation des métadonnées Stripe d'un achat
(postId, buyerId, buyerName, buyerEmail, quantity).
"""
from typing import Any, Dict, Optional
from marketplace.utils.validators import parse_quantity

# module marketplace.payments.metadata
def make_metadata(
    *,
    post_id: str,
    buyer_id: Optional[str],
    buyer_name: Optional[str],
    buyer_email: Optional[str],
    quantity: int,
) -> Dict[str, str]:
    """
    Stripe n'accepte que des chaînes: les valeurs absentes deviennent "".
    La confirmation relit ces champs, elle n'a donc besoin d'aucun état côté serveur.
    """
    return {
        "postId": str(post_id),
        "buyerId": buyer_id or "",
        "buyerName": buyer_name or "",
        "buyerEmail": buyer_email or "",
        "quantity": str(quantity),
    }

def extract_metadata_from_session(session: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extrait les métadonnées d'achat depuis une session Checkout.
    - quantity invalide ou absente => 1
    - chaînes vides => None
    """
    meta = (session.get("metadata") if isinstance(session, dict) else None) or {}
    quantity = parse_quantity(meta.get("quantity"), default=1)
    return {
        "post_id": meta.get("postId") or None,
        "buyer_id": meta.get("buyerId") or None,
        "buyer_name": meta.get("buyerName") or None,
        "buyer_email": meta.get("buyerEmail") or None,
        "quantity": quantity if quantity and quantity >= 1 else 1,
    }
