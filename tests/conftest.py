from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.jobs.models import Category, Job
from apps.jobs.services import JobLifecycleService
from apps.users.models import User, WorkerProfile, SeekerProfile
from core.constants import UserType


def make_seeker(username, **kwargs):
    user = User.objects.create_user(
        username=username, email=f"{username}@example.com", password='Test@1234',
        user_type=UserType.SEEKER, **kwargs
    )
    SeekerProfile.objects.create(user=user, full_name=username.title(), city='Pune')
    return user


def make_worker(username, **kwargs):
    user = User.objects.create_user(
        username=username, email=f"{username}@example.com", password='Test@1234',
        user_type=UserType.WORKER, **kwargs
    )
    WorkerProfile.objects.create(user=user, full_name=username.title(), profession='Plumber')
    return user


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def service():
    return JobLifecycleService()


@pytest.fixture
def seeker(db):
    return make_seeker('sita', mobile='9000000001')


@pytest.fixture
def other_seeker(db):
    return make_seeker('omar')


@pytest.fixture
def worker(db):
    return make_worker('wasim', mobile='9000000002')


@pytest.fixture
def second_worker(db):
    return make_worker('wendy')


@pytest.fixture
def category(db):
    return Category.objects.create(name='Plumber', description='Pipes and drains')


@pytest.fixture
def open_job(seeker, service):
    job, _ = service.create_job(
        seeker=seeker,
        title='Fix kitchen sink',
        description='Kitchen sink is leaking under the cabinet.',
        budget=Decimal('500'),
    )
    return job


@pytest.fixture
def assigned_job(seeker, worker):
    return Job.objects.create(
        seeker=seeker, worker=worker, title='Paint bedroom', description='Two coats of paint please.',
        budget=Decimal('1000'), commission_amount=Decimal('180'), status='assigned',
    )


@pytest.fixture
def in_progress_job(assigned_job):
    assigned_job.status = 'in_progress'
    assigned_job.save()
    return assigned_job


def auth(client, user):
    client.force_authenticate(user=user)
    return client
