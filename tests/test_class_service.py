from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from core.exceptions import AccessDenied, NoActiveSubscription, NotFound
from models.billing import Subscription
from models.classes import ClassSession, TeacherEarnings
from models.enums import ClassStatus, SubscriptionStatus, UserRole
from schemas.class_schema import ClassNotesUpdate
from services.class_service import ClassService, calculate_earning
from services.earnings_service import EarningsService
from tests.conftest import NOW, add_class, link, make_package, make_subscription, make_user


@pytest.mark.parametrize("minutes, expected", [
    (30, Decimal("2.00")),
    (60, Decimal("4.00")),
    (45, Decimal("3.00")),
    (1, Decimal("0.07")),
    (0, Decimal("0.00")),
])
def test_calculate_earning(minutes, expected):
    assert calculate_earning(minutes) == expected


def test_start_class_uses_package_duration(db):
    teacher = make_user(db, "teacher1", UserRole.TEACHER)
    student = make_user(db, "student1")
    make_subscription(db, student, make_package(db, class_duration=45))
    link(db, teacher, student)

    class_session = ClassService(db).start_class(teacher.id, student.id, now=NOW)

    assert class_session.status == ClassStatus.IN_PROGRESS
    assert class_session.duration == 45
    assert class_session.start_time == NOW
    assert class_session.meeting_link.startswith("https://meet.jit.si/qodwa-")


def test_start_class_requires_link(db, enrolled):
    _, student, _, _ = enrolled
    stranger = make_user(db, "stranger", UserRole.TEACHER)

    with pytest.raises(NotFound):
        ClassService(db).start_class(stranger.id, student.id, now=NOW)


def test_start_class_requires_active_subscription(db):
    teacher = make_user(db, "teacher1", UserRole.TEACHER)
    student = make_user(db, "student1")
    make_subscription(db, student, make_package(db), status=SubscriptionStatus.CANCELLED)
    link(db, teacher, student)

    with pytest.raises(NoActiveSubscription):
        ClassService(db).start_class(teacher.id, student.id, now=NOW)
    assert db.query(ClassSession).count() == 0


def test_start_class_does_not_check_monthly_limit(db, enrolled):
    teacher, student, _, subscription = enrolled
    for day in range(1, 9):
        add_class(db, student, teacher, subscription, datetime(2025, 6, day, 9))

    class_session = ClassService(db).start_class(teacher.id, student.id, now=NOW)

    assert class_session.status == ClassStatus.IN_PROGRESS


def test_end_class_without_open_class_writes_nothing(db, enrolled):
    teacher, student, _, subscription = enrolled

    with pytest.raises(NotFound):
        ClassService(db).end_class(teacher.id, student.id, now=NOW)

    db.refresh(subscription)
    assert subscription.classes_completed == 0
    assert db.query(TeacherEarnings).count() == 0


def test_end_class_books_duration_and_earnings(db, enrolled):
    teacher, student, _, subscription = enrolled
    service = ClassService(db)
    started = service.start_class(teacher.id, student.id, now=NOW)

    result = service.end_class(teacher.id, student.id, now=NOW + timedelta(minutes=44, seconds=40))

    assert result["id"] == started.id
    assert result["duration"] == 45
    assert result["earnings"] == Decimal("3.00")

    class_session = db.query(ClassSession).filter(ClassSession.id == started.id).one()
    assert class_session.status == ClassStatus.COMPLETED
    assert class_session.end_time == NOW + timedelta(minutes=44, seconds=40)
    assert class_session.teacher_earning == Decimal("3.00")

    db.refresh(subscription)
    assert subscription.classes_completed == 1


def test_two_classes_accumulate_monthly_earnings(db, enrolled):
    teacher, student, _, subscription = enrolled
    service = ClassService(db)
    for start in (datetime(2025, 6, 10, 9), datetime(2025, 6, 12, 9)):
        service.start_class(teacher.id, student.id, now=start)
        service.end_class(teacher.id, student.id, now=start + timedelta(minutes=30))

    row = db.query(TeacherEarnings).filter(TeacherEarnings.teacher_id == teacher.id).one()
    assert (row.month, row.year) == (6, 2025)
    assert row.total_earnings == Decimal("4.00")
    assert row.total_classes == 2

    db.refresh(subscription)
    assert subscription.classes_completed == 2


def test_earnings_rows_are_per_month(db, enrolled):
    teacher, student, _, _ = enrolled
    service = ClassService(db)
    for start in (datetime(2025, 6, 30, 23, 0), datetime(2025, 7, 1, 9, 0)):
        service.start_class(teacher.id, student.id, now=start)
        service.end_class(teacher.id, student.id, now=start + timedelta(minutes=30))

    rows = db.query(TeacherEarnings).order_by(TeacherEarnings.month).all()
    assert [(r.month, r.total_classes) for r in rows] == [(6, 1), (7, 1)]


def test_earnings_summary(db, enrolled):
    teacher, student, _, _ = enrolled
    service = ClassService(db)
    for start in (datetime(2025, 5, 20, 9), datetime(2025, 6, 10, 9), datetime(2025, 6, 11, 9)):
        service.start_class(teacher.id, student.id, now=start)
        service.end_class(teacher.id, student.id, now=start + timedelta(minutes=60))

    summary = EarningsService(db).get_summary(teacher.id, now=NOW)

    assert summary.current_month.earnings == Decimal("8.00")
    assert summary.current_month.classes == 2
    assert summary.all_time.earnings == Decimal("12.00")
    assert summary.all_time.classes == 3
    assert [(p.year, p.month) for p in summary.monthly_breakdown] == [(2025, 6), (2025, 5)]
    assert len(summary.recent_classes) == 3
    assert summary.recent_classes[0].student_name == "Maryam"


def test_earnings_summary_for_new_teacher(db):
    teacher = make_user(db, "teacher1", UserRole.TEACHER)

    summary = EarningsService(db).get_summary(teacher.id, now=NOW)

    assert summary.current_month.earnings == Decimal("0.00")
    assert summary.all_time.classes == 0
    assert summary.recent_classes == []


def test_list_students_includes_session_limit(db, enrolled):
    teacher, student, _, _ = enrolled
    other_student = make_user(db, "student2")
    link(db, teacher, other_student, primary=False)

    summaries = {s.username: s for s in ClassService(db).list_students(teacher.id, now=NOW)}

    assert summaries["student1"].is_primary is True
    assert summaries["student1"].session_limit.remaining_sessions == 8
    assert summaries["student2"].is_primary is False
    assert summaries["student2"].session_limit is None


def test_update_class_notes(db, enrolled):
    teacher, student, _, subscription = enrolled
    class_session = add_class(db, student, teacher, subscription, datetime(2025, 6, 3, 9))

    updated = ClassService(db).update_class_notes(
        teacher.id, student.id, class_session.id,
        ClassNotesUpdate(memorization="Surah Al-Mulk 1-10", review="Juz Amma"),
    )

    assert updated.memorization == "Surah Al-Mulk 1-10"
    assert updated.review == "Juz Amma"
    assert updated.notes is None
    assert [c.id for c in ClassService(db).get_student_notes(teacher.id, student.id)] == [class_session.id]


def test_notes_are_private_to_linked_teachers(db, enrolled):
    teacher, student, _, subscription = enrolled
    class_session = add_class(db, student, teacher, subscription, datetime(2025, 6, 3, 9))
    stranger = make_user(db, "stranger", UserRole.TEACHER)

    with pytest.raises(AccessDenied):
        ClassService(db).get_student_notes(stranger.id, student.id)
    with pytest.raises(AccessDenied):
        ClassService(db).update_class_notes(stranger.id, student.id, class_session.id, ClassNotesUpdate(notes="x"))
