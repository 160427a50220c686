import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from marketplace.config import APP_URL
from marketplace.payments.service import CheckoutService, record_direct_payment

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/posts", tags=["Payments API"])

def get_checkout_service(request: Request) -> CheckoutService:
    """Orchestrateur construit avec le fournisseur Stripe initialisé dans le lifespan."""
    return CheckoutService(getattr(request.app.state, "checkout_provider", None))

async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    return body

# module marketplace.payments.views
@router.post("/confirm-payment")
async def confirm_payment(request: Request, checkout: CheckoutService = Depends(get_checkout_service)):
    """
    Confirme une session Stripe après redirection (le client transmet {"sessionId": "..."}).
    - 400 si sessionId manquant ou paiement non complété, 404 si session/annonce introuvable
    - Réponse: {msg, paymentId, amount}
    """
    body = await _json_body(request)
    return checkout.confirm_session(body.get("sessionId"))

@router.post("/{post_id}/pay")
async def pay(post_id: str, request: Request):
    """
    Enregistrement direct d'un paiement (flux hors carte), sans vérification externe.
    - Entrée JSON: {quantity, buyerId, buyerName, buyerEmail}
    - Réponse: {msg, paymentId, amount}
    """
    body = await _json_body(request)
    return record_direct_payment(post_id, body)

@router.post("/{post_id}/create-checkout-session")
async def create_checkout_session(
    post_id: str,
    request: Request,
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """
    Crée une session Checkout Stripe pour une annonce.
    - Entrée JSON: {quantity?, buyerId, buyerName, buyerEmail}
    - Redirections construites sur APP_URL (sinon base_url de la requête)
    - Réponse: {sessionId, publishableKey}
    """
    body = await _json_body(request)
    base_url = APP_URL or str(request.base_url)
    return checkout.create_session(post_id, body, base_url)
