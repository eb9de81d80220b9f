from django.db import models
from django.db.models import F, FloatField, Q, Value
from django.db.models.functions import ACos, Cast, Cos, Greatest, Least, Radians, Sin
from django.conf import settings
from core.constants import JobStatus, ApplicationStatus, PaymentStatus, JOB_STATUS_TRANSITIONS

from .utils import EARTH_RADIUS_KM


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)
    icon = models.CharField(max_length=255, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'categories'

    def __str__(self):
        return self.name


class JobQuerySet(models.QuerySet):
    def with_details(self):
        """Attach category, seeker and worker display fields."""
        return self.select_related('category').annotate(
            category_name=F('category__name'),
            seeker_name=F('seeker__seeker_profile__full_name'),
            seeker_photo=F('seeker__seeker_profile__profile_photo'),
            seeker_city=F('seeker__seeker_profile__city'),
            worker_name=F('worker__worker_profile__full_name'),
            worker_photo=F('worker__worker_profile__profile_photo'),
        )

    def for_participant(self, user):
        return self.filter(Q(seeker=user) | Q(worker=user))

    def with_distance(self, latitude, longitude):
        """Annotate great-circle distance in km (spherical law of cosines)."""
        lat = Radians(Value(float(latitude)))
        lng = Radians(Value(float(longitude)))
        job_lat = Radians(Cast('latitude', FloatField()))
        job_lng = Radians(Cast('longitude', FloatField()))
        cosine = Cos(lat) * Cos(job_lat) * Cos(job_lng - lng) + Sin(lat) * Sin(job_lat)
        # Rounding can push the cosine just past 1 for identical points.
        cosine = Greatest(Least(cosine, Value(1.0)), Value(-1.0))
        return self.annotate(distance=Value(EARTH_RADIUS_KM) * ACos(cosine))

    def within_radius(self, latitude, longitude, radius_km):
        return self.with_distance(latitude, longitude).filter(distance__lte=float(radius_km))


class Job(models.Model):
    seeker = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='posted_jobs')
    worker = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_jobs'
    )
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='jobs')
    title = models.CharField(max_length=255)
    description = models.TextField()
    budget = models.DecimalField(max_digits=10, decimal_places=2)
    location = models.TextField(blank=True, null=True)
    latitude = models.DecimalField(max_digits=10, decimal_places=8, blank=True, null=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, blank=True, null=True)
    status = models.CharField(max_length=20, choices=JobStatus.choices, default=JobStatus.OPEN)
    scheduled_date = models.DateTimeField(blank=True, null=True)
    completion_date = models.DateTimeField(blank=True, null=True)
    payment_status = models.CharField(max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    commission_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JobQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='job_status_idx'),
            models.Index(fields=['latitude', 'longitude'], name='job_location_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    def can_transition_to(self, status):
        return JobStatus(status) in JOB_STATUS_TRANSITIONS[JobStatus(self.status)]

    def other_party_id(self, user_id):
        """Participant to notify when ``user_id`` changes the job."""
        return self.worker_id if user_id == self.seeker_id else self.seeker_id


class JobApplication(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='applications')
    worker = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='job_applications')
    proposal_message = models.TextField()
    quoted_price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices, default=ApplicationStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['job', 'worker'], name='unique_job_worker'),
        ]

    def __str__(self):
        return f"Application {self.id} by {self.worker_id} on job {self.job_id}"
