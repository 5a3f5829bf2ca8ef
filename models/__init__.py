from .db import db, atomic
from .user import User, ROLE_HIERARCHY
from .audit_log import AuditLog
from .session import Session
from .membership_plan import MembershipPlan
from .membership import Membership
from .time_slot import TimeSlot
from .booking import Booking
