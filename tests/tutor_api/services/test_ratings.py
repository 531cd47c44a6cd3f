import uuid

from tutor_api.models.account import Role
from tutor_api.models.review import Review
from tutor_api.models.tutor_profile import TutorProfile
from tutor_api.services import ratings


def _add_reviews(db, make_account, tutor: TutorProfile, scores: list[int]) -> None:
    for score in scores:
        student = make_account(role=Role.STUDENT)
        db.add(Review(tutor_id=tutor.id, student_id=student.id, rating=score))
    db.flush()


def test_summary_of_tutor_without_reviews_is_null(db, make_tutor) -> None:
    tutor = make_tutor()

    summary = ratings.summarize_ratings(db, tutor.id)

    assert summary.rating is None
    assert summary.review_count == 0


def test_recompute_uses_mean_of_all_stored_reviews(db, make_account, make_tutor) -> None:
    tutor = make_tutor()

    _add_reviews(db, make_account, tutor, [5, 4])
    summary = ratings.recompute_tutor_rating(db, tutor.id)
    db.commit()

    assert summary == ratings.RatingSummary(rating=4.5, review_count=2)
    db.refresh(tutor)
    assert tutor.rating == 4.5
    assert tutor.total_reviews == 2

    _add_reviews(db, make_account, tutor, [3])
    ratings.recompute_tutor_rating(db, tutor.id)
    db.commit()

    db.refresh(tutor)
    assert tutor.rating == 4.0
    assert tutor.total_reviews == 3


def test_recompute_corrects_a_drifted_aggregate(db, make_account, make_tutor) -> None:
    tutor = make_tutor()
    _add_reviews(db, make_account, tutor, [2, 4])
    tutor.rating = 1.0
    tutor.total_reviews = 17
    db.commit()

    ratings.recompute_tutor_rating(db, tutor.id)
    db.commit()

    db.refresh(tutor)
    assert tutor.rating == 3.0
    assert tutor.total_reviews == 2


def test_recompute_only_counts_the_given_tutor(db, make_account, make_tutor) -> None:
    rated = make_tutor()
    other = make_tutor()
    _add_reviews(db, make_account, rated, [1])
    _add_reviews(db, make_account, other, [5, 5, 5])

    summary = ratings.recompute_tutor_rating(db, rated.id)

    assert summary == ratings.RatingSummary(rating=1.0, review_count=1)


def test_recompute_for_unknown_tutor_writes_nothing(db) -> None:
    summary = ratings.recompute_tutor_rating(db, uuid.uuid4())

    assert summary.review_count == 0
