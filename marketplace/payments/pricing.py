"""
Calculs de prix purs (pas de Stripe, pas de DB).
Le montant est toujours calculé côté serveur à partir du prix stocké de l'annonce.
"""
from typing import Any, Dict, List, Optional

# module marketplace.payments.pricing
def price_from_post(post: Dict[str, Any]) -> float:
    """
    Prix unitaire d'une annonce (float).
    - Autorise post.get("price") à être str|float|int.
    - Retourne 0.0 si parsing impossible.
    """
    try:
        return float(post.get("price") or 0)
    except (TypeError, ValueError):
        return 0.0

def compute_amount(post: Dict[str, Any], quantity: int) -> float:
    """Montant = prix × quantité, arrondi au centime."""
    return round(price_from_post(post) * quantity, 2)

def to_cents(amount: float) -> int:
    return int(round(amount * 100))

def amount_from_session(session: Dict[str, Any], post: Dict[str, Any], quantity: int) -> float:
    """
    Montant confirmé: amount_total rapporté par Stripe (centimes), sinon prix × quantité.
    Aucun montant fourni par le client n'est pris en compte.
    """
    total = session.get("amount_total")
    if total is None:
        return compute_amount(post, quantity)
    return round(int(total) / 100, 2)

def to_line_items(post: Dict[str, Any], quantity: int, currency: str) -> List[Dict[str, Any]]:
    """
    Construit l'unique line_item Stripe (price_data) d'une annonce.
    - unit_amount en centimes, product_data.name = titre, description = contenu (si non vide).
    """
    product: Dict[str, Any] = {"name": post.get("title") or "Article"}
    description: Optional[str] = post.get("content")
    if description:
        product["description"] = description
    return [{
        "quantity": quantity,
        "price_data": {
            "currency": currency,
            "unit_amount": to_cents(price_from_post(post)),
            "product_data": product,
        },
    }]
