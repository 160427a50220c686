"""
Cas d'usage 'payments': orchestre posts, ledger, notifications et Stripe.

Cycle d'un achat par Checkout: INITIATED -> SESSION_CREATED (create_session)
-> CONFIRMED (confirm_session). Une session annulée reste orpheline, sans trace en base.
"""
import logging
from typing import Any, Dict, Optional
from fastapi import HTTPException

from marketplace.config import CHECKOUT_SUCCESS_PATH, CHECKOUT_CANCEL_PATH
from marketplace.posts import repository as posts_repository
from marketplace.notifications import service as notifications_service
from marketplace.utils.validators import parse_quantity
from . import repository
from . import pricing
from . import metadata as meta
from .stripe_client import StripeCheckoutProvider, CheckoutSessionNotFound

logger = logging.getLogger(__name__)

STRIPE_NOT_CONFIGURED = "Stripe not configured on server"

def _load_post(post_id: Optional[str]) -> Dict[str, Any]:
    post = posts_repository.get_post(post_id) if post_id else None
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post

def _require_quantity(value: Any) -> int:
    qty = parse_quantity(value, default=1)
    if qty is None or qty < 1:
        raise HTTPException(status_code=400, detail="Invalid quantity")
    return qty

def record_purchase(
    *,
    post: Dict[str, Any],
    buyer_id: Optional[str],
    buyer_name: Optional[str],
    buyer_email: Optional[str],
    quantity: int,
    amount: float,
    session_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Inscrit le paiement au ledger puis écrit les deux notifications (admin, acheteur).
    Trois écritures indépendantes: si une notification échoue, le paiement reste inscrit.
    Lève repository.DuplicatePaymentError si la session est déjà inscrite.
    """
    payment = repository.insert_payment(
        post_id=str(post.get("id")),
        buyer_id=buyer_id,
        buyer_name=buyer_name,
        buyer_email=buyer_email,
        quantity=quantity,
        amount=amount,
        session_id=session_id,
    )
    if not payment or payment.get("id") is None:
        raise HTTPException(status_code=500, detail="Server error")
    notifications_service.notify_purchase(
        post=post,
        payment_id=payment["id"],
        buyer_id=buyer_id,
        buyer_name=buyer_name,
        buyer_email=buyer_email,
        quantity=quantity,
        amount=amount,
    )
    return payment

def record_direct_payment(post_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Paiement "manuel" sans vérification externe: le serveur fait confiance à l'appelant.
    - quantity absente => 1; non entière ou < 1 => 400
    - amount = prix de l'annonce × quantité (jamais celui du client)
    - Pas de garde anti-rejeu: chaque appel crée un paiement et deux notifications.
    """
    post = _load_post(post_id)
    qty = _require_quantity(body.get("quantity"))
    amount = pricing.compute_amount(post, qty)
    payment = record_purchase(
        post=post,
        buyer_id=body.get("buyerId") or None,
        buyer_name=body.get("buyerName") or None,
        buyer_email=body.get("buyerEmail") or None,
        quantity=qty,
        amount=amount,
    )
    logger.info("payments.pay recorded payment_id=%s post_id=%s amount=%s", payment["id"], post.get("id"), amount)
    return {"msg": "Payment recorded", "paymentId": payment["id"], "amount": amount}

class CheckoutService:
    """
    Orchestrateur Checkout. Le fournisseur Stripe est injecté à la construction
    (None => fournisseur non configuré, toutes les opérations renvoient 500).
    """

    def __init__(self, provider: Optional[StripeCheckoutProvider]):
        self.provider = provider

    def _require_provider(self) -> StripeCheckoutProvider:
        if self.provider is None:
            raise HTTPException(status_code=500, detail=STRIPE_NOT_CONFIGURED)
        return self.provider

    def create_session(self, post_id: str, body: Dict[str, Any], base_url: str) -> Dict[str, Any]:
        """
        Crée la session Checkout d'une annonce.
        - Prix issu de l'annonce stockée, jamais du client.
        - success_url porte {CHECKOUT_SESSION_ID}; cancel_url renvoie à la racine du site.
        - metadata {postId, buyerId, buyerName, buyerEmail, quantity} rend la confirmation autonome.
        """
        provider = self._require_provider()
        post = _load_post(post_id)
        qty = _require_quantity(body.get("quantity"))

        base = base_url.rstrip("/")
        sep = "&" if "?" in CHECKOUT_SUCCESS_PATH else "?"
        success_url = f"{base}{CHECKOUT_SUCCESS_PATH}{sep}session_id={{CHECKOUT_SESSION_ID}}"
        cancel_url = f"{base}{CHECKOUT_CANCEL_PATH}"
        metadata = meta.make_metadata(
            post_id=str(post.get("id")),
            buyer_id=body.get("buyerId"),
            buyer_name=body.get("buyerName"),
            buyer_email=body.get("buyerEmail"),
            quantity=qty,
        )
        try:
            session = provider.create_session(
                line_items=pricing.to_line_items(post, qty, provider.currency),
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        except Exception:
            logger.exception("payments.create_session failed post_id=%s", post_id)
            raise HTTPException(status_code=500, detail="Server error creating Stripe session")
        logger.info("payments.create_session session_id=%s post_id=%s qty=%s", session.get("id"), post_id, qty)
        return {"sessionId": session.get("id"), "publishableKey": provider.publishable_key}

    def confirm_session(self, session_id: Optional[str]) -> Dict[str, Any]:
        """
        Confirme une session après redirection et inscrit l'achat une seule fois.
        - Session non payée => 400, aucun effet de bord.
        - Montant = amount_total Stripe (sinon prix × quantité).
        - Déduplication: paiement identique (post_id, buyer_email, amount, quantity)
          ou même session déjà inscrite => "Already recorded" avec l'id existant.
        """
        if not session_id:
            raise HTTPException(status_code=400, detail="Missing sessionId")
        provider = self._require_provider()
        try:
            session = provider.get_session(session_id)
        except CheckoutSessionNotFound:
            raise HTTPException(status_code=404, detail="Session not found")
        except Exception:
            logger.exception("payments.confirm_session retrieve failed session_id=%s", session_id)
            raise HTTPException(status_code=500, detail="Error confirming payment")

        if session.get("payment_status") != "paid":
            raise HTTPException(status_code=400, detail="Payment not completed")

        purchase = meta.extract_metadata_from_session(session)
        post = _load_post(purchase["post_id"])
        qty = purchase["quantity"]
        amount = pricing.amount_from_session(session, post, qty)

        existing = repository.find_matching_payment(
            post_id=str(post.get("id")),
            buyer_email=purchase["buyer_email"],
            amount=amount,
            quantity=qty,
        )
        if existing:
            return {"msg": "Already recorded", "paymentId": existing.get("id"), "amount": amount}

        try:
            payment = record_purchase(
                post=post,
                buyer_id=purchase["buyer_id"],
                buyer_name=purchase["buyer_name"],
                buyer_email=purchase["buyer_email"],
                quantity=qty,
                amount=amount,
                session_id=session.get("id") or session_id,
            )
        except repository.DuplicatePaymentError:
            # Confirmation concurrente de la même session: l'autre requête a inscrit le paiement
            winner = repository.find_payment_by_session(session.get("id") or session_id)
            if not winner:
                raise HTTPException(status_code=500, detail="Error confirming payment")
            return {"msg": "Already recorded", "paymentId": winner.get("id"), "amount": amount}

        logger.info("payments.confirm recorded payment_id=%s session_id=%s amount=%s", payment["id"], session_id, amount)
        return {"msg": "Payment recorded", "paymentId": payment["id"], "amount": amount}
