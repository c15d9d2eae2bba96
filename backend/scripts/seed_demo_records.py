from datetime import date, timedelta
import random

from studyfeed.db import Base, SessionLocal, engine
from studyfeed.models.follow import Follow
from studyfeed.models.goal import Goal
from studyfeed.models.material import Material
from studyfeed.models.profile import Profile
from studyfeed.models.study_record import StudyRecord


DEMO_USERS = {
    "00000000-0000-0000-0000-000000000001": "たろう",
    "00000000-0000-0000-0000-000000000002": "はなこ",
    "00000000-0000-0000-0000-000000000003": "じろう",
}

DEMO_SUBJECTS = ["数学", "英語", "物理", "化学", "国語"]


def clear_demo_data(db) -> None:
    """Delete rows owned by the demo users so we can reseed cleanly."""
    ids = list(DEMO_USERS)
    for rec in db.query(StudyRecord).filter(StudyRecord.user_id.in_(ids)).all():
        db.delete(rec)  # comments cascade
    db.query(Goal).filter(Goal.user_id.in_(ids)).delete(synchronize_session=False)
    db.query(Material).filter(Material.user_id.in_(ids)).delete(synchronize_session=False)
    db.query(Follow).filter(Follow.follower_id.in_(ids)).delete(synchronize_session=False)
    db.query(Profile).filter(Profile.id.in_(ids)).delete(synchronize_session=False)
    db.commit()


def seed_demo_data(db, weeks: int = 4) -> int:
    """Insert profiles, materials, a follow edge, goals and `weeks` of records.

    Returns the number of study records added.
    """
    today = date.today()
    user_ids = list(DEMO_USERS)

    db.add_all(Profile(id=uid, display_name=name) for uid, name in DEMO_USERS.items())
    db.add_all(Material(user_id=user_ids[0], name=s) for s in DEMO_SUBJECTS)
    # First user follows the second only
    db.add(Follow(follower_id=user_ids[0], following_id=user_ids[1]))
    db.add(Goal(user_id=user_ids[0], title="英単語を毎日100個", date=today + timedelta(days=90)))
    db.add(Goal(user_id=user_ids[1], title="模試でA判定"))

    records = []
    start_day = today - timedelta(weeks=weeks)
    for offset in range((today - start_day).days + 1):
        day = start_day + timedelta(days=offset)
        for uid in user_ids:
            # Roughly four study days a week per user
            if random.random() > 4 / 7:
                continue
            records.append(
                StudyRecord(
                    user_id=uid,
                    subject=random.choice(DEMO_SUBJECTS),
                    duration=random.choice([30, 45, 60, 90, 120]),
                    date=day.strftime("%Y年%m月%d日 19:00"),
                )
            )

    if records:
        db.add_all(records)
    db.commit()

    print(f"Seeded {len(records)} demo study records")
    return len(records)


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_demo_data(db)
        seed_demo_data(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
