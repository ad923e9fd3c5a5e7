import enum


class UserRole(str, enum.Enum):
    HOMEOWNER = "homeowner"
    CONTRACTOR = "contractor"
    ADMIN = "admin"


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ProjectStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    OPEN = "open"
    BIDDING_CLOSED = "bidding_closed"
    MATCHED = "matched"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BidStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SELECTED = "selected"
    NOT_SELECTED = "not_selected"
    WITHDRAWN = "withdrawn"


class NotificationType(str, enum.Enum):
    BID_RECEIVED = "bid_received"
    BID_APPROVED = "bid_approved"
    SYSTEM = "system"


class NotificationChannel(str, enum.Enum):
    IN_APP = "in_app"
    EMAIL = "email"
    SMS = "sms"


class BidErrorCode(str, enum.Enum):
    BID_NOT_FOUND = "BID_NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    CONTRACTOR_NOT_FOUND = "CONTRACTOR_NOT_FOUND"
    BID_ACCESS_DENIED = "BID_ACCESS_DENIED"
    PROJECT_ACCESS_DENIED = "PROJECT_ACCESS_DENIED"
    CONTRACTOR_NOT_VERIFIED = "CONTRACTOR_NOT_VERIFIED"
    BID_INVALID_STATUS = "BID_INVALID_STATUS"
    BID_PROJECT_NOT_OPEN = "BID_PROJECT_NOT_OPEN"
    BID_DEADLINE_PASSED = "BID_DEADLINE_PASSED"
    BID_MAX_REACHED = "BID_MAX_REACHED"
    BID_ALREADY_EXISTS = "BID_ALREADY_EXISTS"
    BID_CODE_UNAVAILABLE = "BID_CODE_UNAVAILABLE"
