"""
Accès aux données pour le ledger des paiements (table 'payments', append-only).
"""
from typing import Any, Dict, Optional
import logging
import marketplace.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

class DuplicatePaymentError(Exception):
    """Insertion refusée par l'index unique sur payments.session_id."""

# module marketplace.payments.repository
def insert_payment(
    *,
    post_id: str,
    buyer_id: Optional[str],
    buyer_name: Optional[str],
    buyer_email: Optional[str],
    quantity: int,
    amount: float,
    session_id: Optional[str] = None,
) -> Optional[dict]:
    """
    Insère une ligne de paiement (service-role) et retourne la ligne créée.
    - Lève DuplicatePaymentError si la session Stripe est déjà inscrite (SQLSTATE 23505).
    """
    row: Dict[str, Any] = {
        "post_id": str(post_id),
        "buyer_id": buyer_id,
        "buyer_name": buyer_name,
        "buyer_email": buyer_email,
        "quantity": quantity,
        "amount": amount,
    }
    if session_id:
        row["session_id"] = session_id
    try:
        res = supabase_client.get_service_supabase().table("payments").insert(row).execute()
    except Exception as e:
        if session_id and supabase_client.is_unique_violation(e):
            raise DuplicatePaymentError(session_id) from e
        raise
    return supabase_client.first_row(res)

def find_matching_payment(*, post_id: str, buyer_email: Optional[str], amount: float, quantity: int) -> Optional[dict]:
    """
    Recherche un paiement identique (post_id, buyer_email, amount, quantity).
    Heuristique de déduplication: deux achats légitimes identiques sont confondus.
    """
    query = (
        supabase_client.get_service_supabase()
        .table("payments")
        .select("*")
        .eq("post_id", str(post_id))
        .eq("amount", amount)
        .eq("quantity", quantity)
    )
    # buyer_email absent: NULL en base, eq() ne matcherait jamais
    query = query.eq("buyer_email", buyer_email) if buyer_email else query.is_("buyer_email", "null")
    res = query.order("created_at", desc=False).limit(1).execute()
    return supabase_client.first_row(res)

def find_payment_by_session(session_id: str) -> Optional[dict]:
    if not session_id:
        return None
    res = (
        supabase_client.get_service_supabase()
        .table("payments")
        .select("*")
        .eq("session_id", session_id)
        .limit(1)
        .execute()
    )
    return supabase_client.first_row(res)
