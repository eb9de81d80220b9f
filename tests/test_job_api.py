from decimal import Decimal
from unittest import mock

import pytest

from apps.jobs.models import Job, JobApplication
from apps.jobs.services import JobLifecycleService
from apps.notifications.models import Notification
from tests.conftest import auth

pytestmark = pytest.mark.django_db

JOBS_URL = '/api/jobs/'
PROPOSAL = 'I can fix this tomorrow morning, parts included.'


def job_payload(**overrides):
    payload = {
        'title': 'Fix kitchen sink',
        'description': 'Kitchen sink is leaking under the cabinet.',
        'budget': '1000',
        'location': 'Baner, Pune',
        'latitude': '18.5204',
        'longitude': '73.8567',
    }
    payload.update(overrides)
    return payload


class TestCreateJob:
    def test_seeker_posts_open_job(self, api_client, seeker):
        response = auth(api_client, seeker).post(JOBS_URL, job_payload(), format='json')

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Job posted successfully'
        assert body['data']['status'] == 'open'
        assert body['data']['commission_details'] == {
            'amount': 1000.0, 'commission': 180.0, 'trustFee': 70.0, 'netAmount': 750.0,
        }
        assert Job.objects.get(pk=body['data']['job_id']).seeker_id == seeker.id

    def test_direct_hire(self, api_client, seeker, worker):
        response = auth(api_client, seeker).post(JOBS_URL, job_payload(worker_id=worker.id), format='json')

        assert response.status_code == 201
        assert response.json()['message'] == 'Job created and assigned to worker'
        assert response.json()['data']['status'] == 'assigned'

    def test_unknown_worker_still_creates_open_job(self, api_client, seeker):
        response = auth(api_client, seeker).post(JOBS_URL, job_payload(worker_id=99999), format='json')

        assert response.status_code == 201
        assert response.json()['data']['status'] == 'open'

    def test_unknown_category(self, api_client, seeker):
        response = auth(api_client, seeker).post(JOBS_URL, job_payload(category_id=777), format='json')

        assert response.status_code == 400
        assert response.json() == {'success': False, 'message': 'Invalid category_id'}

    @pytest.mark.parametrize('field, value', [
        ('title', 'Fix'),
        ('description', 'Too short'),
        ('budget', '99.99'),
        ('latitude', '91'),
    ])
    def test_validation_errors(self, api_client, seeker, field, value):
        response = auth(api_client, seeker).post(JOBS_URL, job_payload(**{field: value}), format='json')

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['message'] == 'Validation failed'
        assert field in body['errors']
        assert not Job.objects.exists()

    def test_requires_authentication(self, api_client):
        response = api_client.post(JOBS_URL, job_payload(), format='json')
        assert response.status_code == 401
        assert response.json()['success'] is False

    def test_workers_cannot_post(self, api_client, worker):
        response = auth(api_client, worker).post(JOBS_URL, job_payload(), format='json')
        assert response.status_code == 403


class TestListJobs:
    @pytest.fixture
    def jobs(self, seeker, worker, category):
        pune = Job.objects.create(
            seeker=seeker, category=category, title='Pune job', description='Near the river.',
            budget=Decimal('300'), latitude=Decimal('18.5204'), longitude=Decimal('73.8567'),
        )
        mumbai = Job.objects.create(
            seeker=seeker, title='Mumbai job', description='Near the sea front.',
            budget=Decimal('800'), latitude=Decimal('19.0760'), longitude=Decimal('72.8777'),
        )
        remote = Job.objects.create(
            seeker=seeker, worker=worker, title='Assigned job', description='No coordinates.',
            budget=Decimal('1500'), status='assigned',
        )
        return pune, mumbai, remote

    def test_public_listing(self, api_client, jobs):
        response = api_client.get(JOBS_URL)

        assert response.status_code == 200
        data = response.json()['data']
        assert [job['title'] for job in data['jobs']] == ['Assigned job', 'Mumbai job', 'Pune job']
        assert data['pagination'] == {'page': 1, 'limit': 20, 'total': 3, 'total_pages': 1}
        assert data['jobs'][0]['worker_name'] == 'Wasim'
        assert data['jobs'][2]['category_name'] == 'Plumber'
        assert data['jobs'][2]['seeker_name'] == 'Sita'
        assert data['jobs'][2]['distance'] == 0

    def test_status_and_budget_filters(self, api_client, jobs):
        response = api_client.get(JOBS_URL, {'status': 'open', 'min_budget': '500'})

        data = response.json()['data']
        assert [job['title'] for job in data['jobs']] == ['Mumbai job']
        assert data['pagination']['total'] == 1

    def test_category_filter(self, api_client, jobs, category):
        response = api_client.get(JOBS_URL, {'category_id': category.id})
        assert [job['title'] for job in response.json()['data']['jobs']] == ['Pune job']

    def test_radius_filter_orders_by_distance(self, api_client, jobs):
        near = api_client.get(JOBS_URL, {'latitude': '18.53', 'longitude': '73.85'})
        data = near.json()['data']
        assert [job['title'] for job in data['jobs']] == ['Pune job']
        assert data['jobs'][0]['distance'] < 2
        assert data['pagination']['total'] == 1

        wide = api_client.get(JOBS_URL, {'latitude': '18.53', 'longitude': '73.85', 'radius': '200'})
        titles = [job['title'] for job in wide.json()['data']['jobs']]
        assert titles == ['Pune job', 'Mumbai job']

    def test_pagination(self, api_client, jobs):
        response = api_client.get(JOBS_URL, {'page': '2', 'limit': '2'})

        data = response.json()['data']
        assert [job['title'] for job in data['jobs']] == ['Pune job']
        assert data['pagination'] == {'page': 2, 'limit': 2, 'total': 3, 'total_pages': 2}

    def test_limit_is_capped(self, api_client, jobs):
        response = api_client.get(JOBS_URL, {'limit': '1000'})
        assert response.json()['data']['pagination']['limit'] == 100

    @pytest.mark.parametrize('params', [
        {'status': 'finished'},
        {'latitude': '18.5'},
        {'min_budget': '900', 'max_budget': '100'},
    ])
    def test_bad_query(self, api_client, params):
        response = api_client.get(JOBS_URL, params)
        assert response.status_code == 400
        assert response.json()['message'] == 'Validation failed'


class TestJobDetail:
    def test_includes_participants(self, api_client, assigned_job):
        response = api_client.get(f"{JOBS_URL}{assigned_job.id}/")

        assert response.status_code == 200
        data = response.json()['data']
        assert data['id'] == assigned_job.id
        assert data['budget'] == '1000.00'
        assert data['seeker_name'] == 'Sita'
        assert data['seeker_mobile'] == '9000000001'
        assert data['worker_name'] == 'Wasim'
        assert data['worker_mobile'] == '9000000002'
        assert data['worker_profession'] == 'Plumber'

    def test_leading_colon_is_tolerated(self, api_client, open_job):
        response = api_client.get(f"{JOBS_URL}:{open_job.id}/")
        assert response.status_code == 200
        assert response.json()['data']['worker_name'] is None

    def test_non_numeric_id(self, api_client):
        response = api_client.get(f"{JOBS_URL}abc/")
        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_missing_job(self, api_client, db):
        response = api_client.get(f"{JOBS_URL}424242/")
        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Job not found'}


class TestApplications:
    def test_worker_applies(self, api_client, worker, open_job):
        response = auth(api_client, worker).post(
            f"{JOBS_URL}{open_job.id}/apply/", {'proposal_message': PROPOSAL, 'quoted_price': '450'}, format='json'
        )

        assert response.status_code == 201
        application = JobApplication.objects.get(pk=response.json()['data']['application_id'])
        assert application.quoted_price == Decimal('450.00')

    def test_duplicate_application(self, api_client, worker, open_job):
        client = auth(api_client, worker)
        url = f"{JOBS_URL}{open_job.id}/apply/"
        client.post(url, {'proposal_message': PROPOSAL}, format='json')
        response = client.post(url, {'proposal_message': PROPOSAL}, format='json')

        assert response.status_code == 409
        assert response.json() == {'success': False, 'message': 'You have already applied for this job'}

    def test_short_proposal(self, api_client, worker, open_job):
        response = auth(api_client, worker).post(
            f"{JOBS_URL}{open_job.id}/apply/", {'proposal_message': 'Hire me'}, format='json'
        )
        assert response.status_code == 400
        assert 'proposal_message' in response.json()['errors']

    def test_seekers_cannot_apply(self, api_client, other_seeker, open_job):
        response = auth(api_client, other_seeker).post(
            f"{JOBS_URL}{open_job.id}/apply/", {'proposal_message': PROPOSAL}, format='json'
        )
        assert response.status_code == 403

    def test_closed_job(self, api_client, second_worker, assigned_job):
        response = auth(api_client, second_worker).post(
            f"{JOBS_URL}{assigned_job.id}/apply/", {'proposal_message': PROPOSAL}, format='json'
        )
        assert response.status_code == 404
        assert response.json()['message'] == 'Job not found or not available'

    def test_owner_lists_applications(self, api_client, service, seeker, worker, open_job):
        service.apply(worker, open_job.id, PROPOSAL)

        response = auth(api_client, seeker).get(f"{JOBS_URL}{open_job.id}/applications/")

        assert response.status_code == 200
        [application] = response.json()['data']
        assert application['worker_id'] == worker.id
        assert application['worker_name'] == 'Wasim'
        assert application['profession'] == 'Plumber'
        assert application['status'] == 'pending'

    def test_other_seeker_gets_not_found(self, api_client, other_seeker, open_job):
        response = auth(api_client, other_seeker).get(f"{JOBS_URL}{open_job.id}/applications/")
        assert response.status_code == 404

    def test_accept(self, api_client, service, seeker, worker, second_worker, open_job):
        chosen = service.apply(worker, open_job.id, PROPOSAL, Decimal('450'))
        service.apply(second_worker, open_job.id, PROPOSAL)

        response = auth(api_client, seeker).put(f"{JOBS_URL}applications/{chosen.id}/accept/")

        assert response.status_code == 200
        assert response.json()['data'] == {'job_id': open_job.id, 'worker_id': worker.id}
        assert list(
            JobApplication.objects.filter(job=open_job).order_by('worker_id').values_list('status', flat=True)
        ) == ['accepted', 'rejected']

    def test_accept_twice_conflicts(self, api_client, service, seeker, worker, second_worker, open_job):
        first = service.apply(worker, open_job.id, PROPOSAL)
        second = service.apply(second_worker, open_job.id, PROPOSAL)
        client = auth(api_client, seeker)
        client.put(f"{JOBS_URL}applications/{first.id}/accept/")

        response = client.put(f"{JOBS_URL}applications/{second.id}/accept/")

        assert response.status_code == 409
        assert response.json()['success'] is False

    def test_accept_by_non_owner(self, api_client, service, other_seeker, worker, open_job):
        application = service.apply(worker, open_job.id, PROPOSAL)
        response = auth(api_client, other_seeker).put(f"{JOBS_URL}applications/{application.id}/accept/")
        assert response.status_code == 404


class TestStatusAndCancel:
    def test_worker_starts_job(self, api_client, worker, assigned_job):
        response = auth(api_client, worker).put(
            f"{JOBS_URL}{assigned_job.id}/status/", {'status': 'in_progress'}, format='json'
        )

        assert response.status_code == 200
        assert response.json()['data'] == {'job_id': assigned_job.id, 'status': 'in_progress'}

    def test_invalid_transition(self, api_client, seeker, assigned_job):
        response = auth(api_client, seeker).put(
            f"{JOBS_URL}{assigned_job.id}/status/", {'status': 'completed'}, format='json'
        )

        assert response.status_code == 400
        assert response.json() == {
            'success': False, 'message': 'Cannot change status from assigned to completed',
        }
        assigned_job.refresh_from_db()
        assert assigned_job.status == 'assigned'

    def test_unknown_status(self, api_client, seeker, assigned_job):
        response = auth(api_client, seeker).put(
            f"{JOBS_URL}{assigned_job.id}/status/", {'status': 'finished'}, format='json'
        )
        assert response.status_code == 400
        assert 'status' in response.json()['errors']

    def test_outsider_status_update(self, api_client, second_worker, assigned_job):
        response = auth(api_client, second_worker).put(
            f"{JOBS_URL}{assigned_job.id}/status/", {'status': 'in_progress'}, format='json'
        )
        assert response.status_code == 404

    def test_cancel(self, api_client, seeker, worker, assigned_job):
        response = auth(api_client, seeker).put(
            f"{JOBS_URL}{assigned_job.id}/cancel/", {'cancellation_reason': 'Plans changed'}, format='json'
        )

        assert response.status_code == 200
        assert response.json() == {'success': True, 'message': 'Job cancelled successfully'}
        assert Notification.objects.get(user=worker).message == 'Plans changed'

    def test_cancel_completed(self, api_client, seeker, assigned_job):
        assigned_job.status = 'completed'
        assigned_job.save()

        response = auth(api_client, seeker).put(f"{JOBS_URL}{assigned_job.id}/cancel/", {}, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == 'Cannot cancel completed job'


class TestMyJobs:
    def test_worker_sees_assigned_jobs(self, api_client, worker, assigned_job, open_job):
        response = auth(api_client, worker).get(f"{JOBS_URL}my/jobs/")

        data = response.json()['data']
        assert [job['id'] for job in data['jobs']] == [assigned_job.id]
        assert data['pagination']['total'] == 1

    def test_seeker_sees_posted_jobs(self, api_client, seeker, assigned_job, open_job):
        response = auth(api_client, seeker).get(f"{JOBS_URL}my/jobs/", {'status': 'open'})

        data = response.json()['data']
        assert [job['id'] for job in data['jobs']] == [open_job.id]

    def test_requires_authentication(self, api_client):
        assert api_client.get(f"{JOBS_URL}my/jobs/").status_code == 401


class TestErrorEnvelope:
    def test_unexpected_error_is_wrapped(self, api_client, seeker, open_job):
        with mock.patch.object(JobLifecycleService, 'cancel', side_effect=RuntimeError('db went away')):
            response = auth(api_client, seeker).put(f"{JOBS_URL}{open_job.id}/cancel/", {}, format='json')

        assert response.status_code == 500
        assert response.json() == {'success': False, 'message': 'Internal server error'}

    def test_error_detail_shown_in_debug(self, api_client, seeker, open_job, settings):
        settings.DEBUG = True
        with mock.patch.object(JobLifecycleService, 'cancel', side_effect=RuntimeError('db went away')):
            response = auth(api_client, seeker).put(f"{JOBS_URL}{open_job.id}/cancel/", {}, format='json')

        assert response.json()['error'] == 'db went away'

    def test_unknown_route(self, api_client, db):
        response = api_client.get('/api/nothing-here/')
        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Route /api/nothing-here/ not found'}


class TestPathsWithoutTrailingSlash:
    def test_create_and_list(self, api_client, seeker):
        created = auth(api_client, seeker).post('/api/jobs', job_payload(), format='json')
        assert created.status_code == 201
        assert created.json()['data']['status'] == 'open'

        listed = api_client.get('/api/jobs')
        assert listed.status_code == 200
        assert listed.json()['data']['pagination']['total'] == 1

    def test_detail(self, api_client, open_job):
        assert api_client.get(f"/api/jobs/{open_job.id}").status_code == 200
        assert api_client.get(f"/api/jobs/:{open_job.id}").status_code == 200
        assert api_client.get('/api/jobs/abc').status_code == 400

    def test_apply_list_and_accept(self, api_client, seeker, worker, open_job):
        applied = auth(api_client, worker).post(
            f"/api/jobs/{open_job.id}/apply", {'proposal_message': PROPOSAL}, format='json'
        )
        assert applied.status_code == 201
        application_id = applied.json()['data']['application_id']

        client = auth(api_client, seeker)
        listed = client.get(f"/api/jobs/{open_job.id}/applications")
        assert listed.status_code == 200
        assert [a['id'] for a in listed.json()['data']] == [application_id]

        accepted = client.put(f"/api/jobs/applications/{application_id}/accept")
        assert accepted.status_code == 200
        open_job.refresh_from_db()
        assert open_job.worker_id == worker.id

    def test_status_and_cancel(self, api_client, worker, assigned_job):
        client = auth(api_client, worker)
        started = client.put(f"/api/jobs/{assigned_job.id}/status", {'status': 'in_progress'}, format='json')
        assert started.status_code == 200
        assert started.json()['data']['status'] == 'in_progress'

        cancelled = client.put(f"/api/jobs/{assigned_job.id}/cancel", {'cancellation_reason': 'Sick'}, format='json')
        assert cancelled.status_code == 200
        assigned_job.refresh_from_db()
        assert assigned_job.status == 'cancelled'

    def test_my_jobs(self, api_client, worker, assigned_job):
        response = auth(api_client, worker).get('/api/jobs/my/jobs')
        assert response.status_code == 200
        assert [job['id'] for job in response.json()['data']['jobs']] == [assigned_job.id]
