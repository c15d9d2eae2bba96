"""Reference enrichment for feed items.

Attaches display metadata (material cover image, owner display name and
avatar) to a batch of records and goals with at most two queries: one
against `materials` by name and one against `profiles` by id, whatever the
batch size. Empty key sets issue no query at all.

Material lookup is exact string equality on `materials.name` vs
`study_records.subject`. It is not a foreign key: a miss, or a name that
differs only by whitespace, resolves to None.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from studyfeed.models.goal import Goal
from studyfeed.models.material import Material
from studyfeed.models.profile import Profile
from studyfeed.models.study_record import StudyRecord
from studyfeed.schemas.goal import EnrichedGoal, GoalRead
from studyfeed.schemas.record import EnrichedRecord, RecordRead


@dataclass(frozen=True)
class OwnerInfo:
    display_name: Optional[str]
    avatar_url: Optional[str]


def material_images_by_name(db: Session, names: Iterable[str]) -> dict[str, Optional[str]]:
    """name -> image for every material whose name is in `names`.

    When several materials share a name the newest one wins.
    """
    wanted = set(names)
    if not wanted:
        return {}
    rows = (
        db.query(Material.name, Material.image)
        .filter(Material.name.in_(wanted))
        .order_by(Material.created_at.desc())
        .all()
    )
    images: dict[str, Optional[str]] = {}
    for name, image in rows:
        images.setdefault(name, image)
    return images


def owners_by_id(db: Session, user_ids: Iterable[str]) -> dict[str, OwnerInfo]:
    wanted = set(user_ids)
    if not wanted:
        return {}
    rows = (
        db.query(Profile.id, Profile.display_name, Profile.avatar_url)
        .filter(Profile.id.in_(wanted))
        .all()
    )
    return {pid: OwnerInfo(name, avatar) for pid, name, avatar in rows}


def enrich(
    db: Session,
    records: Sequence[StudyRecord | RecordRead],
    goals: Sequence[Goal | GoalRead] = (),
) -> tuple[list[EnrichedRecord], list[EnrichedGoal]]:
    """Enrich records and goals together, preserving input order.

    Owner ids are collected across both sets so profiles are fetched once.
    Goals only receive profile metadata. Accepts ORM rows or read models.
    """
    images = material_images_by_name(db, (r.subject for r in records))
    owners = owners_by_id(
        db,
        [r.user_id for r in records] + [g.user_id for g in goals],
    )

    enriched_records = [
        enrich_record(RecordRead.model_validate(r), images, owners) for r in records
    ]
    enriched_goals = [
        enrich_goal(GoalRead.model_validate(g), owners) for g in goals
    ]
    return enriched_records, enriched_goals


def enrich_record(
    record: RecordRead,
    images: dict[str, Optional[str]],
    owners: dict[str, OwnerInfo],
) -> EnrichedRecord:
    owner = owners.get(record.user_id)
    return EnrichedRecord(
        **record.model_dump(),
        material_image=images.get(record.subject),
        user_display_name=owner.display_name if owner else None,
        user_avatar_url=owner.avatar_url if owner else None,
    )


def enrich_goal(goal: GoalRead, owners: dict[str, OwnerInfo]) -> EnrichedGoal:
    owner = owners.get(goal.user_id)
    return EnrichedGoal(
        **goal.model_dump(),
        user_display_name=owner.display_name if owner else None,
        user_avatar_url=owner.avatar_url if owner else None,
    )
