"""Backend marketplace: annonces, paiements (direct ou Stripe Checkout) et notifications."""
