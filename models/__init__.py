from .base import Base
from .users import User, Profile, TeacherStudent
from .billing import Package, Subscription
from .classes import ClassSession, TeacherEarnings
from .chat import Message
from .enums import UserRole, UserStatus, Gender, BillingFrequency, SubscriptionStatus, ClassStatus
