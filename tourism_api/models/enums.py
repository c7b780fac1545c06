from enum import Enum


class UserRole(str, Enum):
    TOURIST = "TOURIST"
    GUIDE = "GUIDE"
    SITE_ADMIN = "SITE_ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


# Bookings in these states block deletion of their event / site admin / guide
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
