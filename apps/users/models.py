from decimal import Decimal

from django.db import models
from django.db.models import F
from django.contrib.auth.models import AbstractUser
from core.constants import UserType, AvailabilityStatus


class User(AbstractUser):
    email = models.EmailField(unique=True)
    mobile = models.CharField(max_length=15, blank=True, null=True, unique=True)
    user_type = models.CharField(max_length=10, choices=UserType.choices)
    is_verified = models.BooleanField(default=False)

    @property
    def is_seeker(self):
        return self.user_type == UserType.SEEKER

    @property
    def is_worker(self):
        return self.user_type == UserType.WORKER

    @property
    def display_name(self):
        profile = getattr(self, 'worker_profile' if self.is_worker else 'seeker_profile', None)
        if profile and profile.full_name:
            return profile.full_name
        return self.get_full_name() or self.username


class WorkerProfileManager(models.Manager):
    def record_completion(self, user_id, earnings):
        """Count one more completed job and add its net payout."""
        return self.filter(user_id=user_id).update(
            total_jobs_completed=F('total_jobs_completed') + 1,
            total_earnings=F('total_earnings') + Decimal(earnings),
        )


class SeekerProfileManager(models.Manager):
    def record_job_posted(self, user_id):
        return self.filter(user_id=user_id).update(
            total_jobs_posted=F('total_jobs_posted') + 1
        )

    def record_spend(self, user_id, amount):
        return self.filter(user_id=user_id).update(
            total_amount_spent=F('total_amount_spent') + Decimal(amount)
        )


class WorkerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='worker_profile')
    full_name = models.CharField(max_length=255)
    profile_photo = models.CharField(max_length=500, blank=True, null=True)
    profession = models.CharField(max_length=100)
    experience_years = models.DecimalField(max_digits=4, decimal_places=1, default=0)
    hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    bio = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    latitude = models.DecimalField(max_digits=10, decimal_places=8, blank=True, null=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, blank=True, null=True)
    availability_status = models.CharField(
        max_length=10, choices=AvailabilityStatus.choices, default=AvailabilityStatus.AVAILABLE
    )
    average_rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    total_jobs_completed = models.PositiveIntegerField(default=0)
    total_earnings = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = WorkerProfileManager()

    def __str__(self):
        return f"Worker: {self.full_name}"


class SeekerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='seeker_profile')
    full_name = models.CharField(max_length=255)
    profile_photo = models.CharField(max_length=500, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    latitude = models.DecimalField(max_digits=10, decimal_places=8, blank=True, null=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, blank=True, null=True)
    average_rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    total_jobs_posted = models.PositiveIntegerField(default=0)
    total_amount_spent = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SeekerProfileManager()

    def __str__(self):
        return f"Seeker: {self.full_name}"
