"""
Job lifecycle: posting, applications, acceptance and status changes.

Every mutating operation runs inside one ``transaction.atomic`` block on the
database alias the service was built with, and locks the job row with
``select_for_update`` before deciding anything based on its state. Errors
raised inside the block roll the whole operation back.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DEFAULT_DB_ALIAS, IntegrityError, transaction
from django.utils import timezone

from apps.notifications.models import Notification
from apps.users.models import SeekerProfile, WorkerProfile
from core.constants import ApplicationStatus, JobStatus, NotificationType, PaymentStatus, UserType
from core.exceptions import Conflict, InvalidReference, InvalidStateTransition, NotFoundOrUnauthorized

from .models import Category, Job, JobApplication
from .utils import calculate_commission

logger = logging.getLogger(__name__)
User = get_user_model()


class JobLifecycleService:
    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    # Managers bound to this service's database.
    @property
    def jobs(self):
        return Job.objects.db_manager(self.using)

    @property
    def applications(self):
        return JobApplication.objects.db_manager(self.using)

    @property
    def notifications(self):
        return Notification.objects.db_manager(self.using)

    def _check_category(self, category_id):
        if category_id and not Category.objects.db_manager(self.using).filter(pk=category_id).exists():
            raise InvalidReference('Invalid category_id')

    def _resolve_worker(self, worker_id):
        """
        Return the id of an active worker account, or None.

        The worker row stays locked until the surrounding transaction ends,
        so the account cannot be deactivated before the job is saved.
        """
        if not worker_id:
            return None
        found = (
            User.objects.db_manager(self.using)
            .select_for_update()
            .filter(pk=worker_id, user_type=UserType.WORKER, is_active=True)
            .values_list('pk', flat=True)
            .first()
        )
        if found is None:
            logger.warning(f"Requested worker_id={worker_id} is invalid or not available; creating job as open")
            return None
        return worker_id

    def create_job(self, seeker, title, description, budget, category_id=None, location=None,
                   latitude=None, longitude=None, scheduled_date=None, worker_id=None):
        """
        Post a job. A valid ``worker_id`` hires that worker directly.

        An unknown, inactive or non-worker ``worker_id`` does not fail the
        request: the job is posted as open instead. An unknown ``category_id``
        is rejected with ``InvalidReference``.

        Returns ``(job, commission)`` where ``commission`` is the
        ``calculate_commission`` breakdown of the budget.
        """
        commission = calculate_commission(budget)

        try:
            with transaction.atomic(using=self.using):
                self._check_category(category_id)
                assigned_worker_id = self._resolve_worker(worker_id)

                job = self.jobs.create(
                    seeker=seeker,
                    worker_id=assigned_worker_id,
                    category_id=category_id or None,
                    title=title,
                    description=description,
                    budget=budget,
                    location=location,
                    latitude=latitude,
                    longitude=longitude,
                    scheduled_date=scheduled_date,
                    commission_amount=commission['commission'],
                    status=JobStatus.ASSIGNED if assigned_worker_id else JobStatus.OPEN,
                )
                SeekerProfile.objects.db_manager(self.using).record_job_posted(seeker.pk)

                if assigned_worker_id:
                    self.notifications.enqueue(
                        assigned_worker_id,
                        'New Job Assigned',
                        f"You have been assigned a new job: {title}",
                        NotificationType.JOB,
                        job.pk,
                    )
        except IntegrityError as e:
            # Only a dangling worker/category reference can violate a constraint here.
            logger.error(f"Create job failed for seeker {seeker.pk}: {str(e)}")
            raise InvalidReference()

        logger.info(f"Seeker {seeker.pk} created job {job.pk} with status {job.status}")
        return job, commission

    def apply(self, worker, job_id, proposal_message, quoted_price=None):
        """Submit a worker's bid on an open job."""
        with transaction.atomic(using=self.using):
            job = (
                self.jobs.select_for_update()
                .filter(pk=job_id, status=JobStatus.OPEN)
                .first()
            )
            if job is None:
                raise NotFoundOrUnauthorized('Job not found or not available')

            if self.applications.filter(job=job, worker=worker).exists():
                raise Conflict('You have already applied for this job')

            try:
                with transaction.atomic(using=self.using):
                    application = self.applications.create(
                        job=job,
                        worker=worker,
                        proposal_message=proposal_message,
                        quoted_price=quoted_price if quoted_price is not None else job.budget,
                        status=ApplicationStatus.PENDING,
                    )
            except IntegrityError:
                # The unique (job, worker) constraint is the final word on duplicates.
                raise Conflict('You have already applied for this job')

            self.notifications.enqueue(
                job.seeker_id,
                'New Job Application',
                f"{worker.display_name} has applied for your job: {job.title}",
                NotificationType.JOB,
                job.pk,
            )

        logger.info(f"Worker {worker.pk} applied to job {job.pk} (application {application.pk})")
        return application

    def accept_application(self, seeker, application_id):
        """
        Assign the applying worker to the seeker's job.

        The accepted quote becomes the job budget and every other
        application for the job is rejected. Commission is only re-priced
        when ``RECOMPUTE_COMMISSION_ON_ACCEPT`` is enabled.
        """
        with transaction.atomic(using=self.using):
            application = (
                self.applications.filter(pk=application_id, job__seeker=seeker)
                .only('id', 'job_id')
                .first()
            )
            if application is None:
                raise NotFoundOrUnauthorized('Application not found or unauthorized')

            # Lock the job first so concurrent accepts on the same job serialize here.
            job = self.jobs.select_for_update().get(pk=application.job_id)
            application = self.applications.select_for_update().get(pk=application.pk)

            if job.status != JobStatus.OPEN or job.worker_id is not None:
                raise Conflict('Job already has an assigned worker')
            if application.status != ApplicationStatus.PENDING:
                raise Conflict('Application has already been processed')

            job.worker_id = application.worker_id
            job.status = JobStatus.ASSIGNED
            job.budget = application.quoted_price
            update_fields = ['worker', 'status', 'budget', 'updated_at']
            if settings.RECOMPUTE_COMMISSION_ON_ACCEPT:
                job.commission_amount = calculate_commission(job.budget)['commission']
                update_fields.append('commission_amount')
            job.save(update_fields=update_fields)

            application.status = ApplicationStatus.ACCEPTED
            application.save(update_fields=['status', 'updated_at'])

            rejected = (
                self.applications.filter(job=job)
                .exclude(pk=application.pk)
                .update(status=ApplicationStatus.REJECTED, updated_at=timezone.now())
            )

            self.notifications.enqueue(
                application.worker_id,
                'Application Accepted',
                f"Your application for '{job.title}' has been accepted",
                NotificationType.JOB,
                job.pk,
            )

        logger.info(
            f"Seeker {seeker.pk} accepted application {application.pk} for job {job.pk}; "
            f"rejected {rejected} other application(s)"
        )
        return job, application

    def _get_participant_job_for_update(self, user, job_id):
        job = self.jobs.select_for_update().for_participant(user).filter(pk=job_id).first()
        if job is None:
            raise NotFoundOrUnauthorized('Job not found or unauthorized')
        return job

    def update_status(self, user, job_id, status, completion_notes=None):
        """
        Move a job along the status table on behalf of its seeker or worker.

        Reaching ``completed`` stamps the completion date, credits the
        worker with ``budget - commission_amount`` and the seeker with the
        gross budget spent.
        """
        try:
            requested = JobStatus(status)
        except ValueError:
            raise InvalidStateTransition('unknown', status, f"Invalid status: {status}")

        with transaction.atomic(using=self.using):
            job = self._get_participant_job_for_update(user, job_id)

            if not job.can_transition_to(requested):
                raise InvalidStateTransition(job.status, requested.value)

            previous = job.status
            job.status = requested
            update_fields = ['status', 'updated_at']

            if requested == JobStatus.COMPLETED:
                job.completion_date = timezone.now()
                job.payment_status = PaymentStatus.PENDING
                update_fields += ['completion_date', 'payment_status']

                if job.worker_id:
                    WorkerProfile.objects.db_manager(self.using).record_completion(
                        job.worker_id, Decimal(job.budget) - Decimal(job.commission_amount)
                    )
                SeekerProfile.objects.db_manager(self.using).record_spend(job.seeker_id, job.budget)

            job.save(update_fields=update_fields)

            notify_user_id = job.other_party_id(user.pk)
            if notify_user_id:
                message = f"Job status changed to {requested.value}"
                if completion_notes:
                    message = f"{message}. Notes: {completion_notes}"
                self.notifications.enqueue(
                    notify_user_id, 'Job Status Updated', message, NotificationType.JOB, job.pk
                )

        logger.info(f"User {user.pk} moved job {job.pk} from {previous} to {requested.value}")
        return job

    def cancel(self, user, job_id, reason=None):
        """Cancel any job that has not been completed. No counters change."""
        with transaction.atomic(using=self.using):
            job = self._get_participant_job_for_update(user, job_id)

            if job.status == JobStatus.COMPLETED:
                raise InvalidStateTransition(job.status, JobStatus.CANCELLED.value, 'Cannot cancel completed job')

            job.status = JobStatus.CANCELLED
            job.save(update_fields=['status', 'updated_at'])

            notify_user_id = job.other_party_id(user.pk)
            if notify_user_id:
                self.notifications.enqueue(
                    notify_user_id,
                    'Job Cancelled',
                    reason or 'Job has been cancelled',
                    NotificationType.JOB,
                    job.pk,
                )

        logger.info(f"User {user.pk} cancelled job {job.pk}")
        return job
