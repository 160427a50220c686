from typing import List, Optional, Dict, Any
import logging
import marketplace.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module marketplace.posts.repository
def list_posts() -> List[dict]:
    """Annonces triées de la plus récente à la plus ancienne (created_at desc)."""
    res = (
        supabase_client.get_supabase()
        .table("posts")
        .select("*")
        .order("created_at", desc=True)
        .execute()
    )
    return res.data or []

def get_post(post_id: str) -> Optional[dict]:
    """
    Récupère une annonce par id.
    - None si introuvable, ou si l'id n'est pas un identifiant valide (22P02).
    - Toute autre erreur Supabase remonte.
    """
    if not post_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("posts")
            .select("*")
            .eq("id", post_id)
            .limit(1)
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception as e:
        if supabase_client.is_invalid_input(e):
            return None
        logger.exception("posts.repository.get_post failed id=%s", post_id)
        raise

def create_post(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = supabase_client.get_service_supabase().table("posts").insert(data).execute()
        return supabase_client.first_row(res) or {"status": "ok"}
    except Exception:
        logger.exception("posts.repository.create_post failed data=%s", data)
        return None

def update_post(post_id: str, data: Dict[str, Any]) -> Optional[dict]:
    """Met à jour une annonce; None si aucune ligne n'a été modifiée (id inconnu)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("posts")
            .update(data)
            .eq("id", post_id)
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception:
        logger.exception("posts.repository.update_post failed id=%s data=%s", post_id, data)
        return None

def delete_post(post_id: str) -> bool:
    """
    Supprime une annonce. Les paiements associés ne sont pas touchés (pas de cascade).
    - False si aucune ligne supprimée ou en cas d'erreur.
    """
    try:
        res = supabase_client.get_service_supabase().table("posts").delete().eq("id", post_id).execute()
        return bool(res.data)
    except Exception:
        logger.exception("posts.repository.delete_post failed id=%s", post_id)
        return False
