# core/constants.py
from django.db import models


class UserType(models.TextChoices):
    WORKER = 'worker', 'Worker'
    SEEKER = 'seeker', 'Seeker'


class JobStatus(models.TextChoices):
    OPEN = 'open', 'Open'                      # Posted, accepting applications
    ASSIGNED = 'assigned', 'Assigned'          # Worker chosen, work not started
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    DISPUTED = 'disputed', 'Disputed'          # Resolution belongs to the disputes service


class ApplicationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'      # Worker applied, awaiting seeker response
    ACCEPTED = 'accepted', 'Accepted'
    REJECTED = 'rejected', 'Rejected'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    REFUNDED = 'refunded', 'Refunded'


class NotificationType(models.TextChoices):
    JOB = 'job', 'Job'
    PAYMENT = 'payment', 'Payment'
    REVIEW = 'review', 'Review'
    SYSTEM = 'system', 'System'
    REFERRAL = 'referral', 'Referral'


class AvailabilityStatus(models.TextChoices):
    AVAILABLE = 'available', 'Available'
    BUSY = 'busy', 'Busy'
    OFFLINE = 'offline', 'Offline'


# Status changes a participant may request through the status endpoint.
# Cancelled and disputed are terminal here.
JOB_STATUS_TRANSITIONS = {
    JobStatus.OPEN: frozenset({JobStatus.CANCELLED}),
    JobStatus.ASSIGNED: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.DISPUTED}),
    JobStatus.COMPLETED: frozenset({JobStatus.DISPUTED}),
    JobStatus.CANCELLED: frozenset(),
    JobStatus.DISPUTED: frozenset(),
}

# Statuses accepted by the status update endpoint.
REQUESTABLE_JOB_STATUSES = (
    JobStatus.ASSIGNED,
    JobStatus.IN_PROGRESS,
    JobStatus.COMPLETED,
    JobStatus.CANCELLED,
    JobStatus.DISPUTED,
)
