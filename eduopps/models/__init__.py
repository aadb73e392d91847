from .base import Base, TenantModel
from .school import School
from .role import UserRole
from .user import User
from .opportunity import Opportunity
from .student_interest import StudentInterest
from .student_preferences import StudentPreferences

__all__ = [
    'Base',
    'TenantModel',
    'School',
    'UserRole',
    'User',
    'Opportunity',
    'StudentInterest',
    'StudentPreferences'
]
