"""
Custom Exceptions - Application-specific error types
"""


class NeoRoutineException(Exception):
    """Base exception for all NeoRoutine errors"""
    pass


class DatabaseError(NeoRoutineException):
    """Raised when database operations fail"""
    pass


class UserNotFoundError(NeoRoutineException):
    """Raised when a user cannot be found"""
    pass


class RoutineNotFoundError(NeoRoutineException):
    """Raised when a routine is missing, archived or owned by someone else"""
    pass


class TaskNotFoundError(NeoRoutineException):
    """Raised when a task is not an active task of its routine"""
    pass


class CheckInNotFoundError(NeoRoutineException):
    """Raised when removing a check-in that does not exist"""
    pass


class CheckInAlreadyExistsError(DatabaseError):
    """Raised when the check-in unique index rejects an insert"""
    pass


class BadgeAlreadyExistsError(DatabaseError):
    """Raised when the (user_id, badge_id) unique index rejects an insert"""
    pass


class UnknownBadgeError(NeoRoutineException):
    """Raised when a badge id is not in the badge catalogue"""
    pass


class InvalidCheckInDataError(NeoRoutineException):
    """Raised when check-in data validation fails"""
    pass


class ApiEnvelopeError(NeoRoutineException):
    """Raised when an API response envelope reports failure"""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
