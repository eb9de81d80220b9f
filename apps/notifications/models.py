import logging

from django.db import models
from django.conf import settings
from core.constants import NotificationType

logger = logging.getLogger(__name__)


class NotificationManager(models.Manager):
    def enqueue(self, user_id, title, message, type=NotificationType.SYSTEM, reference_id=None):
        """Append a user-facing alert. Delivery is handled elsewhere."""
        notification = self.create(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            reference_id=reference_id,
        )
        logger.info(f"Queued {type} notification {notification.id} for user {user_id}")
        return notification


class Notification(models.Model):
    """User-facing alert written by the job lifecycle."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=10, choices=NotificationType.choices, default=NotificationType.SYSTEM)
    reference_id = models.BigIntegerField(null=True, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = NotificationManager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
        ]

    def __str__(self):
        return f"Notification to {self.user_id} - {self.title}"
