"""Endpoints API pour les annonces (posts).
- CRUD admin: création (multipart + image optionnelle), mise à jour, suppression (require_admin).
- Lecture publique: liste (plus récentes d'abord) et détail.
- Gestion d'erreurs: 404 quand introuvable, 400 pour validations, 500 en cas d'échec Supabase.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from marketplace.utils.security import require_admin
from marketplace.utils.validators import parse_price
from marketplace.posts import repository as posts_repository
from marketplace.posts.uploads import remove_upload, save_upload

router = APIRouter(prefix="/posts", tags=["Posts API"])

EDITABLE_FIELDS = ("title", "content", "price", "image")

@router.post("/create")
def create_post(
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user: Dict[str, Any] = Depends(require_admin),
):
    """Crée une annonce (admin uniquement).
    - title requis, price >= 0.
    - image (optionnelle) enregistrée sous /uploads avec un nom aléatoire.
    """
    title = (title or "").strip()
    if not title:
        raise HTTPException(status_code=400, detail="Missing fields")
    parsed_price = parse_price(price)
    if parsed_price is None:
        raise HTTPException(status_code=400, detail="Invalid price")

    data: Dict[str, Any] = {
        "title": title,
        "content": (content or "").strip(),
        "price": parsed_price,
        "created_by": user["id"],
    }
    if image is not None and image.filename:
        data["image"] = save_upload(image)

    created = posts_repository.create_post(data)
    if not created:
        # Pas d'image orpheline sous /uploads
        remove_upload(data.get("image"))
        raise HTTPException(status_code=500, detail="Server error")
    return {"msg": "Post created", "id": created.get("id")}

@router.get("")
def list_posts():
    return posts_repository.list_posts()

@router.get("/{post_id}")
def get_post(post_id: str):
    post = posts_repository.get_post(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post

@router.put("/{post_id}", dependencies=[Depends(require_admin)])
async def update_post(post_id: str, request: Request):
    """Met à jour une annonce (admin uniquement).
    - Seuls title/content/price/image sont acceptés; le créateur n'est jamais modifiable.
    - 400 si aucune donnée valide, 404 si l'annonce n'existe pas.
    """
    try:
        body: Dict[str, Any] = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    data: Dict[str, Any] = {k: body[k] for k in EDITABLE_FIELDS if k in body and body[k] is not None}
    if "price" in data:
        data["price"] = parse_price(data["price"])
        if data["price"] is None:
            raise HTTPException(status_code=400, detail="Invalid price")
    if "title" in data:
        data["title"] = str(data["title"]).strip()
        if not data["title"]:
            raise HTTPException(status_code=400, detail="Missing fields")
    if not data:
        raise HTTPException(status_code=400, detail="Nothing to update")

    if not posts_repository.get_post(post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    updated = posts_repository.update_post(post_id, data)
    if not updated:
        raise HTTPException(status_code=500, detail="Server error")
    return {"msg": "Post updated"}

@router.delete("/{post_id}", dependencies=[Depends(require_admin)])
def delete_post(post_id: str):
    """Supprime une annonce (admin uniquement); l'historique des paiements est conservé."""
    if not posts_repository.get_post(post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    if not posts_repository.delete_post(post_id):
        raise HTTPException(status_code=500, detail="Server error")
    return {"msg": "Post deleted"}
