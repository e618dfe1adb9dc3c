from sqlalchemy.orm import Session, joinedload
from models.users import User, TeacherStudent
import uuid

class TeacherRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_link(self, teacher_id: uuid.UUID, student_id: uuid.UUID):
        return self.db.query(TeacherStudent).filter(
            TeacherStudent.teacher_id == teacher_id,
            TeacherStudent.student_id == student_id
        ).first()

    def get_active_link(self, teacher_id: uuid.UUID, student_id: uuid.UUID):
        """Active teacher/student relationship, or None."""
        return self.db.query(TeacherStudent).filter(
            TeacherStudent.teacher_id == teacher_id,
            TeacherStudent.student_id == student_id,
            TeacherStudent.is_active == True
        ).first()

    def get_linked_students(self, teacher_id: uuid.UUID):
        return self.db.query(User).join(
            TeacherStudent, TeacherStudent.student_id == User.id
        ).filter(
            TeacherStudent.teacher_id == teacher_id,
            TeacherStudent.is_active == True
        ).order_by(User.username).all()

    def add_link(self, teacher_id: uuid.UUID, student_id: uuid.UUID, notes: str) -> TeacherStudent:
        link = TeacherStudent(teacher_id=teacher_id, student_id=student_id, is_active=True, notes=notes)
        self.db.add(link)
        self.db.flush()
        return link

    def get_active_links_for_student(self, student_id: uuid.UUID):
        return self.db.query(TeacherStudent).options(joinedload(TeacherStudent.teacher)).filter(
            TeacherStudent.student_id == student_id,
            TeacherStudent.is_active == True
        ).order_by(TeacherStudent.created_at.desc()).all()

    def count_active_links(self, teacher_id: uuid.UUID) -> int:
        return self.db.query(TeacherStudent).filter(
            TeacherStudent.teacher_id == teacher_id,
            TeacherStudent.is_active == True
        ).count()

    def count_primary_students(self, teacher_id: uuid.UUID) -> int:
        return self.db.query(User).filter(User.assigned_teacher_id == teacher_id).count()
