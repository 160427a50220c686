"""
Adaptateur Stripe: centralise les appels Checkout.
La clé secrète est portée par l'instance (passée à chaque appel via api_key),
sans modifier stripe.api_key globalement.
"""
import logging
from typing import Any, Dict, List, Optional
import stripe

from marketplace import config

logger = logging.getLogger(__name__)

class CheckoutSessionNotFound(Exception):
    pass

def _as_dict(obj: Any) -> Dict[str, Any]:
    # StripeObject -> dict récursif (métadonnées incluses)
    if obj is None:
        return {}
    if isinstance(obj, dict) and not hasattr(obj, "to_dict"):
        return obj
    for attr in ("to_dict", "to_dict_recursive"):
        fn = getattr(obj, attr, None)
        if callable(fn):
            return fn()
    return dict(obj)

# module marketplace.payments.stripe_client
class StripeCheckoutProvider:
    """
    Fournisseur de sessions Checkout hébergées par Stripe.
    - secret_key: clé secrète (obligatoire)
    - publishable_key: renvoyée au client pour la redirection
    """

    def __init__(self, secret_key: str, publishable_key: str = "", currency: str = "usd"):
        if not secret_key:
            raise ValueError("secret_key is required")
        self.secret_key = secret_key
        self.publishable_key = publishable_key
        self.currency = currency

    @classmethod
    def from_config(cls) -> Optional["StripeCheckoutProvider"]:
        """Construit le fournisseur depuis la configuration; None si STRIPE_SECRET_KEY est absent."""
        if not config.STRIPE_SECRET_KEY:
            return None
        return cls(
            secret_key=config.STRIPE_SECRET_KEY,
            publishable_key=config.STRIPE_PUBLISHABLE_KEY,
            currency=config.STRIPE_CURRENCY,
        )

    def create_session(
        self,
        *,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Crée une session Stripe Checkout (mode "payment", carte).
        Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
        """
        session = stripe.checkout.Session.create(
            api_key=self.secret_key,
            line_items=line_items,
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
            payment_method_types=["card"],
        )
        return _as_dict(session)

    def get_session(self, session_id: str) -> Dict[str, Any]:
        """
        Récupère une session Checkout par son identifiant.
        Lève CheckoutSessionNotFound si Stripe ne la connaît pas.
        """
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.secret_key)
        except stripe.InvalidRequestError as e:
            if getattr(e, "code", None) == "resource_missing" or getattr(e, "http_status", None) == 404:
                raise CheckoutSessionNotFound(session_id) from e
            raise
        if not session:
            raise CheckoutSessionNotFound(session_id)
        return _as_dict(session)
