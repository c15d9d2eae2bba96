from scripts.seed_demo_records import DEMO_USERS, clear_demo_data, seed_demo_data

from studyfeed.models.follow import Follow
from studyfeed.models.profile import Profile
from studyfeed.models.study_record import StudyRecord
from studyfeed.services.stats import minutes_by_day


def test_seed_and_clear(db):
    added = seed_demo_data(db, weeks=2)

    records = db.query(StudyRecord).all()
    assert len(records) == added
    assert db.query(Profile).count() == len(DEMO_USERS)
    assert db.query(Follow).count() == 1
    # Seeded dates are in a format the stats layer understands
    assert sum(minutes_by_day(records).values()) == sum(r.duration for r in records)

    clear_demo_data(db)
    assert db.query(StudyRecord).count() == 0
    assert db.query(Profile).count() == 0
