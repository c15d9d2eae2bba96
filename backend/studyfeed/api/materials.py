from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from studyfeed.api.deps import commit_or_500, require_viewer
from studyfeed.core.config import settings
from studyfeed.core.constants import MATERIALS_BUCKET, MSG_MATERIAL_NAME_REQUIRED
from studyfeed.db import get_db
from studyfeed.models.material import Material
from studyfeed.schemas.material import MaterialRead
from studyfeed.services.storage import StorageClient, get_storage

router = APIRouter(prefix="/materials", tags=["materials"])


@router.get("", response_model=list[MaterialRead])
def list_materials(db: Session = Depends(get_db)):
    """All materials, shared across users, newest first."""
    return db.query(Material).order_by(Material.created_at.desc()).all()


@router.get("/search", response_model=list[MaterialRead])
def search_materials(q: str = Query(""), db: Session = Depends(get_db)):
    q = q.strip()
    if not q:
        return []
    return (
        db.query(Material)
        .filter(Material.name.ilike(f"%{q}%"))
        .limit(settings.search_limit)
        .all()
    )


@router.post("", response_model=MaterialRead)
def create_material(
    name: str = Form(""),
    image: Optional[UploadFile] = File(None),
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
):
    """Add a material; the cover image goes to storage or is inlined."""
    # Stored as typed: the name is the exact join key for record subjects
    if not name.strip():
        raise HTTPException(status_code=422, detail=MSG_MATERIAL_NAME_REQUIRED)

    image_ref = None
    if image is not None and image.filename:
        data = image.file.read()
        if data:
            image_ref = storage.upload_image(
                MATERIALS_BUCKET, viewer_id, image.filename, data, image.content_type
            )

    row = Material(user_id=viewer_id, name=name, image=image_ref)
    db.add(row)
    commit_or_500(db, "Adding material")
    db.refresh(row)
    return row
