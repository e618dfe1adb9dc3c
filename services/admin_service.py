import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from core.exceptions import BadRequest, NotFound
from models.enums import UserRole
from repositories.teacher_repo import TeacherRepository
from repositories.user_repo import UserRepository
from schemas.admin_schema import (
    AssignmentStats,
    AssignmentsOverview,
    StudentAssignmentSummary,
    TeacherAssignmentSummary,
)
from services.user_service import to_brief, to_linked_teacher

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.teacher_repo = TeacherRepository(db)

    def assign_teacher(
        self, teacher_id: uuid.UUID, student_id: uuid.UUID, is_primary: bool, notes: Optional[str] = None
    ):
        teacher = self.user_repo.get_by_id(teacher_id)
        if not teacher or teacher.role != UserRole.TEACHER:
            raise BadRequest("Invalid teacher ID or user is not a teacher")
        student = self.user_repo.get_by_id(student_id)
        if not student or student.role != UserRole.STUDENT:
            raise BadRequest("Invalid student ID or user is not a student")

        link = self.teacher_repo.get_link(teacher_id, student_id)
        try:
            if is_primary:
                student.assigned_teacher_id = teacher_id
                if link:
                    link.is_active = True
                    link.notes = notes or "Primary teacher assignment"
                else:
                    self.teacher_repo.add_link(teacher_id, student_id, notes or "Primary teacher assignment")
            else:
                if link:
                    raise BadRequest("Teacher-student relationship already exists")
                self.teacher_repo.add_link(teacher_id, student_id, notes or "Additional teacher connection")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Teacher %s assigned to student %s (%s)", teacher_id, student_id, "primary" if is_primary else "additional"
        )
        return teacher, student

    def unassign_teacher(self, teacher_id: uuid.UUID, student_id: uuid.UUID) -> bool:
        """Deactivate the pair's link and drop the primary assignment if it
        pointed at this teacher. Returns whether the primary was removed."""
        student = self.user_repo.get_by_id(student_id)
        if not student or student.role != UserRole.STUDENT:
            raise BadRequest("Invalid student ID or user is not a student")

        link = self.teacher_repo.get_active_link(teacher_id, student_id)
        is_primary = student.assigned_teacher_id == teacher_id
        if not link and not is_primary:
            raise NotFound("Teacher-student relationship not found")

        try:
            if link:
                link.is_active = False
            if is_primary:
                student.assigned_teacher_id = None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Teacher %s unassigned from student %s (primary removed: %s)", teacher_id, student_id, is_primary)
        return is_primary

    def list_assignments(self) -> AssignmentsOverview:
        teachers = self.user_repo.get_by_role(UserRole.TEACHER)
        students = self.user_repo.get_by_role(UserRole.STUDENT)

        teacher_rows = [
            TeacherAssignmentSummary(
                **to_brief(teacher).model_dump(),
                primary_student_count=self.teacher_repo.count_primary_students(teacher.id),
                total_connection_count=self.teacher_repo.count_active_links(teacher.id),
            )
            for teacher in teachers
        ]

        student_rows = []
        unassigned = []
        for student in students:
            primary = student.assigned_teacher
            student_rows.append(StudentAssignmentSummary(
                **to_brief(student).model_dump(),
                assigned_teacher=to_brief(primary) if primary else None,
                additional_teachers=[
                    to_linked_teacher(link)
                    for link in self.teacher_repo.get_active_links_for_student(student.id)
                    if link.teacher_id != student.assigned_teacher_id
                ],
            ))
            if primary is None:
                unassigned.append(to_brief(student))

        return AssignmentsOverview(
            teachers=teacher_rows,
            students=student_rows,
            unassigned_students=unassigned,
            stats=AssignmentStats(
                total_teachers=len(teachers),
                total_students=len(students),
                unassigned_students=len(unassigned),
            ),
        )
