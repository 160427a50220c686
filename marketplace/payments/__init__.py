"""
Module 'payments' (feature-first): point d'entrée public.
Réunit calcul des prix, metadata Stripe, fournisseur Stripe, ledger et orchestration.
"""

from .pricing import price_from_post, compute_amount, amount_from_session, to_line_items
from .metadata import make_metadata, extract_metadata_from_session
from .stripe_client import StripeCheckoutProvider, CheckoutSessionNotFound
from .repository import (
    DuplicatePaymentError,
    insert_payment,
    find_matching_payment,
    find_payment_by_session,
)
from .service import CheckoutService, record_purchase, record_direct_payment

__all__ = [
    # pricing
    "price_from_post",
    "compute_amount",
    "amount_from_session",
    "to_line_items",
    # metadata
    "make_metadata",
    "extract_metadata_from_session",
    # stripe
    "StripeCheckoutProvider",
    "CheckoutSessionNotFound",
    # repository
    "DuplicatePaymentError",
    "insert_payment",
    "find_matching_payment",
    "find_payment_by_session",
    # services
    "CheckoutService",
    "record_purchase",
    "record_direct_payment",
]
