from datetime import datetime, timedelta

import pytest

from core.exceptions import AccessDenied, NoActiveSubscription
from models.enums import ClassStatus, SubscriptionStatus, UserRole
from services.class_service import ClassService
from services.entitlement_service import EntitlementService, month_window
from tests.conftest import NOW, add_class, link, make_package, make_subscription, make_user


def test_month_window_covers_whole_month():
    start, end = month_window(datetime(2024, 2, 10, 8, 30))
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 3, 1) - timedelta(microseconds=1)


def test_month_window_december():
    start, end = month_window(datetime(2025, 12, 31, 23, 59))
    assert start == datetime(2025, 12, 1)
    assert end + timedelta(microseconds=1) == datetime(2026, 1, 1)


def test_scheduled_classes_count_against_allowance(db, enrolled):
    teacher, student, _, subscription = enrolled
    for day in range(1, 6):
        add_class(db, student, teacher, subscription, datetime(2025, 6, day, 9))
    add_class(db, student, teacher, subscription, datetime(2025, 6, 20, 9), status=ClassStatus.SCHEDULED)
    add_class(db, student, teacher, subscription, datetime(2025, 6, 22, 9), status=ClassStatus.SCHEDULED)

    limit = EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)

    assert limit.sessions_used == 5
    assert limit.sessions_scheduled == 2
    assert limit.remaining_sessions == 1
    assert limit.can_start_session is True
    assert limit.reason is None
    assert limit.next_month_start == datetime(2025, 7, 1)


def test_limit_reached(db, enrolled):
    teacher, student, _, subscription = enrolled
    for day in range(1, 9):
        add_class(db, student, teacher, subscription, datetime(2025, 6, day, 9))

    limit = EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)

    assert limit.remaining_sessions == 0
    assert limit.can_start_session is False
    assert limit.reason == "Monthly session limit reached"


def test_in_progress_and_other_months_are_ignored(db, enrolled):
    teacher, student, _, subscription = enrolled
    add_class(db, student, teacher, subscription, datetime(2025, 5, 31, 23, 30))
    add_class(db, student, teacher, subscription, datetime(2025, 7, 1, 0, 0))
    add_class(db, student, teacher, subscription, NOW, status=ClassStatus.IN_PROGRESS)
    add_class(db, student, teacher, subscription, datetime(2025, 6, 30, 23, 59))

    limit = EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)

    assert limit.sessions_used == 1
    assert limit.remaining_sessions == 7
    assert limit.all_time_completed_sessions == 3


def test_other_teachers_classes_are_not_counted(db, enrolled):
    teacher, student, _, subscription = enrolled
    other = make_user(db, "teacher2", UserRole.TEACHER)
    link(db, other, student, primary=False)
    for day in range(1, 4):
        add_class(db, student, other, subscription, datetime(2025, 6, day, 9))

    limit = EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)

    assert limit.sessions_used == 0
    assert limit.remaining_sessions == 8


def test_default_allowance_when_package_has_none(db):
    teacher = make_user(db, "teacher1", UserRole.TEACHER)
    student = make_user(db, "student1")
    package = make_package(db, classes_per_month=None)
    make_subscription(db, student, package)
    link(db, teacher, student)

    limit = EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)

    assert limit.sessions_total == 8
    assert limit.remaining_sessions == 8


def test_unlinked_teacher_is_denied(db, enrolled):
    _, student, _, _ = enrolled
    stranger = make_user(db, "stranger", UserRole.TEACHER)

    with pytest.raises(AccessDenied):
        EntitlementService(db).check_session_limit(student.id, stranger.id, now=NOW)


def test_inactive_link_is_denied(db):
    teacher = make_user(db, "teacher1", UserRole.TEACHER)
    student = make_user(db, "student1")
    make_subscription(db, student, make_package(db))
    link(db, teacher, student, primary=False, active=False)

    with pytest.raises(AccessDenied):
        EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)


def test_no_active_subscription(db):
    teacher = make_user(db, "teacher1", UserRole.TEACHER)
    student = make_user(db, "student1")
    make_subscription(db, student, make_package(db), status=SubscriptionStatus.EXPIRED)
    link(db, teacher, student)

    with pytest.raises(NoActiveSubscription):
        EntitlementService(db).check_session_limit(student.id, teacher.id, now=NOW)


def test_used_plus_remaining_is_constant_across_classes(db, enrolled):
    teacher, student, _, _ = enrolled
    entitlements = EntitlementService(db)
    classes = ClassService(db)

    for i in range(3):
        start = NOW + timedelta(hours=i)
        classes.start_class(teacher.id, student.id, now=start)
        classes.end_class(teacher.id, student.id, now=start + timedelta(minutes=30))

        limit = entitlements.check_session_limit(student.id, teacher.id, now=NOW)
        assert limit.sessions_used == i + 1
        assert limit.sessions_used + limit.sessions_scheduled + limit.remaining_sessions == limit.sessions_total
