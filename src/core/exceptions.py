"""Custom exceptions and error codes."""

from datetime import datetime
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    ORGANISER_ONLY = "ORGANISER_ONLY"
    ORGANISER_CANNOT_LEAVE = "ORGANISER_CANNOT_LEAVE"
    CANNOT_LEAVE = "CANNOT_LEAVE"
    NOT_A_GROUP_MEMBER = "NOT_A_GROUP_MEMBER"
    GROUP_FULL = "GROUP_FULL"
    MEMBERSHIP_WINDOW_CLOSED = "MEMBERSHIP_WINDOW_CLOSED"
    PROFILE_OWNER_ONLY = "PROFILE_OWNER_ONLY"

    # Not found errors (404)
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    MEMBERSHIP_NOT_FOUND = "MEMBERSHIP_NOT_FOUND"
    PENDING_REQUEST_NOT_FOUND = "PENDING_REQUEST_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_EVENT_DATE = "INVALID_EVENT_DATE"
    ORGANISER_CANNOT_BE_REMOVED = "ORGANISER_CANNOT_BE_REMOVED"
    NO_FIELDS_TO_UPDATE = "NO_FIELDS_TO_UPDATE"

    # Conflict errors (409)
    JOIN_REQUEST_PENDING = "JOIN_REQUEST_PENDING"
    ALREADY_A_GROUP_MEMBER = "ALREADY_A_GROUP_MEMBER"
    MEMBERSHIP_STATUS_CONFLICT = "MEMBERSHIP_STATUS_CONFLICT"
    CAPACITY_BELOW_MEMBERS = "CAPACITY_BELOW_MEMBERS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message=f"Group not found: {group_id}",
            status_code=404,
            details={"group_id": group_id},
        )


class MembershipNotFoundError(AppException):
    """The user has no membership record in the group."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_NOT_FOUND,
            message="User is not a member of this group",
            status_code=404,
            details={"username": username},
        )


class PendingRequestNotFoundError(AppException):
    """No pending join request exists for the user."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.PENDING_REQUEST_NOT_FOUND,
            message="Pending join request not found",
            status_code=404,
            details={"username": username},
        )


class NotificationNotFoundError(AppException):
    """Notification not found."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOTIFICATION_NOT_FOUND,
            message=f"Notification not found: {notification_id}",
            status_code=404,
            details={"notification_id": notification_id},
        )


class OrganiserOnlyError(AppException):
    """Only the group organiser may perform the action."""

    def __init__(self, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.ORGANISER_ONLY,
            message=f"Only the organiser can {action}",
            status_code=403,
            details={"action": action},
        )


class OrganiserCannotLeaveError(AppException):
    """The organiser tried to leave their own group."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.ORGANISER_CANNOT_LEAVE,
            message="Organiser cannot leave their own group",
            status_code=403,
        )


class CannotLeaveError(AppException):
    """Membership status does not allow leaving (e.g. rejected)."""

    def __init__(self, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_LEAVE,
            message="Cannot leave group with current status",
            status_code=403,
            details={"status": status},
        )


class NotAGroupMemberError(AppException):
    """User is neither the organiser nor an approved member."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_GROUP_MEMBER,
            message="You are not an approved member of this group",
            status_code=403,
            details={"group_id": group_id},
        )


class GroupFullError(AppException):
    """Approved members already fill the group's capacity."""

    def __init__(self, max_members: int) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_FULL,
            message="Group is full",
            status_code=403,
            details={"max_members": max_members},
        )


class MembershipWindowClosedError(AppException):
    """Membership changes are locked because the event is imminent or past."""

    def __init__(self, date_time: datetime, lockout_minutes: int) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_WINDOW_CLOSED,
            message=(
                f"Membership changes are closed within {lockout_minutes} minutes "
                "of the event and after it starts"
            ),
            status_code=403,
            details={
                "date_time": date_time.isoformat(),
                "lockout_minutes": lockout_minutes,
            },
        )


class InvalidEventDateError(AppException):
    """Event date must be in the future."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_EVENT_DATE,
            message="Event date must be in the future",
            status_code=400,
        )


class OrganiserCannotBeRemovedError(AppException):
    """The organiser was targeted by a member removal."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.ORGANISER_CANNOT_BE_REMOVED,
            message="Organiser cannot be removed",
            status_code=400,
        )


class JoinRequestPendingError(AppException):
    """A join request from the user is already pending."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.JOIN_REQUEST_PENDING,
            message="Join request already pending",
            status_code=409,
            details={"username": username},
        )


class AlreadyAGroupMemberError(AppException):
    """User is already an approved member of the group."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_GROUP_MEMBER,
            message="Already a member",
            status_code=409,
            details={"username": username},
        )


class MembershipStatusConflictError(AppException):
    """The membership is not in a status the action applies to."""

    def __init__(self, username: str, status: str, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_STATUS_CONFLICT,
            message=f"Cannot {action} a membership that is {status}",
            status_code=409,
            details={"username": username, "status": status, "action": action},
        )


class CapacityBelowMembersError(AppException):
    """Requested capacity is lower than the current approved member count."""

    def __init__(self, requested: int, approved: int) -> None:
        super().__init__(
            error_code=ErrorCode.CAPACITY_BELOW_MEMBERS,
            message=f"Group already has {approved} approved members",
            status_code=409,
            details={"requested": requested, "approved": approved},
        )


class AccountNotFoundError(AppException):
    """No account exists for the username."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACCOUNT_NOT_FOUND,
            message="Account not found",
            status_code=404,
            details={"username": username},
        )


class ProfileOwnerOnlyError(AppException):
    """Users may only update their own profile."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_OWNER_ONLY,
            message="You can only update your own profile",
            status_code=403,
        )


class NoProfileChangesError(AppException):
    """A profile update carried no fields."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NO_FIELDS_TO_UPDATE,
            message="No fields to update",
            status_code=400,
        )
