from datetime import datetime
from typing import Optional

from core.config import FRONTEND_URL


def _layout(title: str, body: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #2563eb;">{title}</h2>
      {body}
      <p>Best regards,<br>The Qodwa Team</p>
    </div>
    """


def welcome_student(student_name: str, teacher_name: Optional[str] = None):
    teacher_line = ""
    if teacher_name:
        teacher_line = f"<p>You have been assigned to <strong>{teacher_name}</strong> as your primary teacher.</p>"
    body = f"""
      <p>Dear {student_name},</p>
      <p>Welcome to Qodwa! We're excited to have you join our learning community.</p>
      {teacher_line}
      <p>You can pick a package and follow your classes from your <a href="{FRONTEND_URL}/dashboard">dashboard</a>.</p>
    """
    return "Welcome to Qodwa - Your Learning Journey Begins!", _layout("Welcome to Qodwa!", body)


def admin_new_student(student_name: str, student_email: str, registered_at: datetime):
    body = f"""
      <p>A new student has registered.</p>
      <ul>
        <li>Name: {student_name}</li>
        <li>Email: {student_email}</li>
        <li>Registered: {registered_at:%Y-%m-%d %H:%M}</li>
      </ul>
      <p>Remember to assign a teacher from the admin dashboard.</p>
    """
    return f"New student registration: {student_name}", _layout("New student", body)


def teacher_assigned_to_student(student_name: str, teacher_name: str, teacher_email: str):
    body = f"""
      <p>Dear {student_name},</p>
      <p><strong>{teacher_name}</strong> ({teacher_email}) is now your teacher.</p>
      <p>Your teacher will start your classes at the agreed times. You can message them from your dashboard.</p>
    """
    return "Your teacher has been assigned", _layout("Meet your teacher", body)


def student_assigned_to_teacher(teacher_name: str, student_name: str, student_email: str):
    body = f"""
      <p>Dear {teacher_name},</p>
      <p>A new student has been assigned to you: <strong>{student_name}</strong> ({student_email}).</p>
      <p>Check the student's monthly class allowance before starting a class.</p>
    """
    return f"New student assigned: {student_name}", _layout("New student assigned", body)


def subscription_confirmed(student_name: str, package_title: str, end_date: Optional[datetime]):
    until = f" until {end_date:%Y-%m-%d}" if end_date else ""
    body = f"""
      <p>Dear {student_name},</p>
      <p>Your subscription to <strong>{package_title}</strong> is now active{until}.</p>
    """
    return "Your Qodwa subscription is active", _layout("Subscription confirmed", body)
