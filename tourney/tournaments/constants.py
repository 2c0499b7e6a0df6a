SPORT_TYPES = (
    "Cricket",
    "Football",
    "Basketball",
    "Tennis",
    "Volleyball",
    "Badminton",
    "Other",
)

TOURNAMENT_STATUS_UPCOMING = "upcoming"
TOURNAMENT_STATUS_ONGOING = "ongoing"
TOURNAMENT_STATUS_COMPLETED = "completed"
TOURNAMENT_STATUS_CANCELLED = "cancelled"
TOURNAMENT_STATUSES = (
    TOURNAMENT_STATUS_UPCOMING,
    TOURNAMENT_STATUS_ONGOING,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_CANCELLED,
)
TOURNAMENT_OPEN_STATUSES = frozenset({TOURNAMENT_STATUS_UPCOMING, TOURNAMENT_STATUS_ONGOING})
TOURNAMENT_STATUS_TRANSITIONS = frozenset(
    {
        (TOURNAMENT_STATUS_UPCOMING, TOURNAMENT_STATUS_ONGOING),
        (TOURNAMENT_STATUS_ONGOING, TOURNAMENT_STATUS_COMPLETED),
        (TOURNAMENT_STATUS_UPCOMING, TOURNAMENT_STATUS_CANCELLED),
        (TOURNAMENT_STATUS_ONGOING, TOURNAMENT_STATUS_CANCELLED),
    }
)

PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_COMPLETED = "completed"
PAYMENT_STATUS_FAILED = "failed"
PAYMENT_STATUS_REFUNDED = "refunded"
PAYMENT_STATUSES = (
    PAYMENT_STATUS_PENDING,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_REFUNDED,
)

REGISTRATION_STATUS_PENDING = "pending"
REGISTRATION_STATUS_CONFIRMED = "confirmed"
REGISTRATION_STATUS_WAITLISTED = "waitlisted"
REGISTRATION_STATUS_CANCELLED = "cancelled"
REGISTRATION_STATUS_COMPLETED = "completed"
REGISTRATION_STATUSES = (
    REGISTRATION_STATUS_PENDING,
    REGISTRATION_STATUS_CONFIRMED,
    REGISTRATION_STATUS_WAITLISTED,
    REGISTRATION_STATUS_CANCELLED,
    REGISTRATION_STATUS_COMPLETED,
)
# Registrations that hold a capacity slot.
REGISTRATION_COUNTED_STATUSES = (
    REGISTRATION_STATUS_PENDING,
    REGISTRATION_STATUS_CONFIRMED,
    REGISTRATION_STATUS_COMPLETED,
)
REGISTRATION_STATUS_TRANSITIONS = frozenset(
    {
        (REGISTRATION_STATUS_PENDING, REGISTRATION_STATUS_CONFIRMED),
        (REGISTRATION_STATUS_CONFIRMED, REGISTRATION_STATUS_COMPLETED),
        (REGISTRATION_STATUS_PENDING, REGISTRATION_STATUS_CANCELLED),
        (REGISTRATION_STATUS_CONFIRMED, REGISTRATION_STATUS_CANCELLED),
    }
)

PAYMENT_METHODS = ("card", "upi", "netbanking", "wallet", "cash")
DEFAULT_PAYMENT_METHOD = "card"

USER_ROLE_USER = "user"
USER_ROLE_ORGANIZER = "organizer"
USER_ROLE_ADMIN = "admin"
USER_ROLES = (USER_ROLE_USER, USER_ROLE_ORGANIZER, USER_ROLE_ADMIN)

OUTBOX_STATUS_NEW = "NEW"
EVENT_REGISTRATION_CREATED = "registration_created"
EVENT_REGISTRATION_PAID = "registration_paid"
EVENT_REGISTRATION_CANCELLED = "registration_cancelled"

ADMIN_STATS_SNAPSHOT_ID = 1
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
RECENT_REGISTRATIONS_DAYS = 30
