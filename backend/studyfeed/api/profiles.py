import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyfeed.api.deps import blank_to_none, commit_or_500, require_viewer
from studyfeed.core.config import settings
from studyfeed.core.constants import AVATARS_BUCKET, BIO_MAX_LENGTH, MSG_SCHOOL_NAME_REQUIRED
from studyfeed.db import get_db
from studyfeed.models.profile import Profile
from studyfeed.models.target_school import TargetSchool
from studyfeed.schemas.profile import (
    MyProfile,
    ProfileRead,
    ProfileUpdate,
    PublicProfile,
    TargetSchoolCreate,
    TargetSchoolRead,
    TargetSchoolUpdate,
    UserSearchResult,
)
from studyfeed.services.social_graph import follower_count, following_count
from studyfeed.services.storage import StorageClient, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


def ensure_profile(db: Session, user_id: str) -> Profile:
    """Return the user's profile, creating an empty one on first access."""
    row = db.query(Profile).filter(Profile.id == user_id).first()
    if row:
        return row
    row = Profile(id=user_id)
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        # Lost a race with a concurrent first access
        row = db.query(Profile).filter(Profile.id == user_id).first()
        if row is None:
            logger.error("Creating profile for %s failed: %s", user_id, e)
            raise HTTPException(status_code=500, detail=f"Creating profile failed: {e}")
        return row
    db.refresh(row)
    return row


def _target_schools(db: Session, user_id: str) -> list[TargetSchool]:
    return (
        db.query(TargetSchool)
        .filter(TargetSchool.user_id == user_id)
        .order_by(TargetSchool.created_at.asc())
        .all()
    )


@router.get("/me", response_model=MyProfile)
def get_my_profile(
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    profile = ensure_profile(db, viewer_id)
    return MyProfile(
        profile=ProfileRead.model_validate(profile),
        target_schools=[TargetSchoolRead.model_validate(s) for s in _target_schools(db, viewer_id)],
        follower_count=follower_count(db, viewer_id),
        following_count=following_count(db, viewer_id),
    )


@router.put("/me", response_model=ProfileRead)
def update_my_profile(
    payload: ProfileUpdate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    profile = ensure_profile(db, viewer_id)
    update_data = payload.model_dump(exclude_unset=True)

    bio = update_data.get("bio")
    if bio and len(bio.strip()) > BIO_MAX_LENGTH:
        raise HTTPException(status_code=422, detail=f"bio must be at most {BIO_MAX_LENGTH} characters")

    for key, value in update_data.items():
        setattr(profile, key, blank_to_none(value))

    commit_or_500(db, "Saving profile")
    db.refresh(profile)
    return profile


@router.post("/me/avatar", response_model=ProfileRead)
def upload_avatar(
    file: UploadFile = File(...),
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
):
    data = file.file.read()
    if not data:
        raise HTTPException(status_code=422, detail="Empty file")

    profile = ensure_profile(db, viewer_id)
    profile.avatar_url = storage.upload_image(
        AVATARS_BUCKET, viewer_id, file.filename, data, file.content_type
    )
    commit_or_500(db, "Saving avatar")
    db.refresh(profile)
    return profile


@router.get("/search", response_model=list[UserSearchResult])
def search_users(q: str = Query(""), db: Session = Depends(get_db)):
    q = q.strip()
    if not q:
        return []
    return (
        db.query(Profile)
        .filter(Profile.display_name.ilike(f"%{q}%"))
        .limit(settings.search_limit)
        .all()
    )


# --------- Target schools --------- #

@router.get("/me/target-schools", response_model=list[TargetSchoolRead])
def list_target_schools(
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    return _target_schools(db, viewer_id)


@router.post("/me/target-schools", response_model=TargetSchoolRead)
def add_target_school(
    payload: TargetSchoolCreate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    name = payload.school_name.strip()
    if not name:
        raise HTTPException(status_code=422, detail=MSG_SCHOOL_NAME_REQUIRED)
    if len(_target_schools(db, viewer_id)) >= settings.max_target_schools:
        raise HTTPException(
            status_code=422,
            detail=f"最大{settings.max_target_schools}校まで登録できます",
        )

    row = TargetSchool(user_id=viewer_id, school_name=name, faculty=blank_to_none(payload.faculty))
    db.add(row)
    commit_or_500(db, "Adding target school")
    db.refresh(row)
    return row


@router.put("/me/target-schools/{school_id}", response_model=TargetSchoolRead)
def update_target_school(
    school_id: str,
    payload: TargetSchoolUpdate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    row = _own_school(db, school_id, viewer_id)
    name = payload.school_name.strip()
    if not name:
        raise HTTPException(status_code=422, detail=MSG_SCHOOL_NAME_REQUIRED)
    row.school_name = name
    row.faculty = blank_to_none(payload.faculty)
    commit_or_500(db, "Updating target school")
    db.refresh(row)
    return row


@router.delete("/me/target-schools/{school_id}")
def delete_target_school(
    school_id: str,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    row = _own_school(db, school_id, viewer_id)
    db.delete(row)
    commit_or_500(db, "Deleting target school")
    return {"message": "Target school deleted"}


def _own_school(db: Session, school_id: str, viewer_id: str) -> TargetSchool:
    row = (
        db.query(TargetSchool)
        .filter(TargetSchool.id == school_id)
        .filter(TargetSchool.user_id == viewer_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Target school not found")
    return row


@router.get("/{user_id}", response_model=PublicProfile)
def get_public_profile(user_id: str, db: Session = Depends(get_db)):
    """Another user's public card. Missing profiles are not created here."""
    row: Optional[Profile] = db.query(Profile).filter(Profile.id == user_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return PublicProfile(
        id=row.id,
        display_name=row.display_name,
        bio=row.bio,
        avatar_url=row.avatar_url,
        follower_count=follower_count(db, user_id),
        following_count=following_count(db, user_id),
    )
