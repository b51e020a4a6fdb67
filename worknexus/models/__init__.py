"""
Database models package.
"""

from worknexus.models.user import User, UserRole, AppRole
from worknexus.models.profile import Profile, VerificationStatus
from worknexus.models.job import Job, JobStatus, JobBookmark
from worknexus.models.application import JobApplication, ApplicationStatus
from worknexus.models.message import Conversation, Message
from worknexus.models.notification import Notification, NotificationType
from worknexus.models.checkin import QRCheckin, SafetyCheckin, CheckinType, EmergencyContact
from worknexus.models.role_request import RoleRequest, RoleRequestStatus
from worknexus.models.worker import WorkerAvailability, Skill, UserSkill, UserActivity, ActivityType
from worknexus.models.payment import Payment, PaymentStatus, Rating

__all__ = [
    "User", "UserRole", "AppRole",
    "Profile", "VerificationStatus",
    "Job", "JobStatus", "JobBookmark",
    "JobApplication", "ApplicationStatus",
    "Conversation", "Message",
    "Notification", "NotificationType",
    "QRCheckin", "SafetyCheckin", "CheckinType", "EmergencyContact",
    "RoleRequest", "RoleRequestStatus",
    "WorkerAvailability", "Skill", "UserSkill", "UserActivity", "ActivityType",
    "Payment", "PaymentStatus", "Rating",
]
