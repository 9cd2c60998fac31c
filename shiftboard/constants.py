ROLE_OWNER = "owner"
ROLE_MANAGER = "manager"
ROLE_EMPLOYEE = "employee"
ROLES = (ROLE_OWNER, ROLE_MANAGER, ROLE_EMPLOYEE)

SHIFT_STATUSES = ("scheduled", "published", "completed", "cancelled")
TIME_OFF_TYPES = ("vacation", "sick", "personal", "unpaid")
REQUEST_STATUSES = ("pending", "approved", "denied")

NOTIFICATION_TYPES = (
    "schedule_published",
    "shift_changed",
    "shift_assigned",
    "time_off_approved",
    "time_off_denied",
    "shift_swap_requested",
    "shift_swap_approved",
    "shift_swap_denied",
    "announcement",
    "direct_message",
)

UNASSIGNED = "unassigned"
DEFAULT_LOCATION_NAME = "Main Location"
DEFAULT_PLAN_TIER = "starter"
MIN_PASSWORD_LENGTH = 6
