import math
import re
import logging

from django.conf import settings
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.constants import UserType
from core.exceptions import NotFoundOrUnauthorized
from core.utils import IsSeeker, IsWorker
from .models import Job, JobApplication
from .serializers import (
    JobCreateSerializer, JobApplicationCreateSerializer, JobStatusUpdateSerializer,
    JobCancelSerializer, JobListQuerySerializer, MyJobsQuerySerializer,
    JobSerializer, JobDetailSerializer, JobApplicationSerializer,
)
from .services import JobLifecycleService
from .utils import paginate

logger = logging.getLogger(__name__)

JOB_ID_PATTERN = re.compile(r'^\d+$')

envelope_schema = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'success': openapi.Schema(type=openapi.TYPE_BOOLEAN),
        'message': openapi.Schema(type=openapi.TYPE_STRING),
        'data': openapi.Schema(type=openapi.TYPE_OBJECT),
    }
)


def paginated_response(queryset, page, limit, offset, serializer_class):
    total = queryset.count()
    jobs = serializer_class(queryset[offset:offset + limit], many=True).data
    return Response({
        'success': True,
        'data': {
            'jobs': jobs,
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'total_pages': math.ceil(total / limit),
            }
        }
    })


class LifecycleMixin:
    """Hands views a lifecycle service bound to the default database."""
    service_class = JobLifecycleService

    def get_service(self):
        return self.service_class()


class JobListCreateView(LifecycleMixin, APIView):

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated(), IsSeeker()]
        return []

    @swagger_auto_schema(
        operation_description="List jobs. Filter by status, category, budget range and distance from a point.",
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('category_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('min_budget', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('max_budget', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('latitude', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('longitude', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('radius', openapi.IN_QUERY, type=openapi.TYPE_NUMBER, description='Kilometres, default 25'),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, description='Capped at 100'),
        ],
        responses={200: envelope_schema, 400: 'Bad Request'}
    )
    def get(self, request):
        query = JobListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data
        page, limit, offset = paginate(filters.get('page', 1), filters.get('limit'))

        jobs = Job.objects.with_details()
        if 'status' in filters:
            jobs = jobs.filter(status=filters['status'])
        if 'category_id' in filters:
            jobs = jobs.filter(category_id=filters['category_id'])
        if 'min_budget' in filters:
            jobs = jobs.filter(budget__gte=filters['min_budget'])
        if 'max_budget' in filters:
            jobs = jobs.filter(budget__lte=filters['max_budget'])

        if 'latitude' in filters:
            radius = filters.get('radius', settings.DEFAULT_SEARCH_RADIUS_KM)
            jobs = jobs.within_radius(filters['latitude'], filters['longitude'], radius)
            jobs = jobs.order_by('distance', '-created_at', '-id')
        else:
            jobs = jobs.order_by('-created_at', '-id')

        return paginated_response(jobs, page, limit, offset, JobSerializer)

    @swagger_auto_schema(
        operation_description="Post a job. Passing a valid worker_id hires that worker directly; "
                              "an invalid one posts the job as open.",
        request_body=JobCreateSerializer,
        responses={201: envelope_schema, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def post(self, request):
        serializer = JobCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        job, commission = self.get_service().create_job(seeker=request.user, **serializer.validated_data)
        assigned = job.worker_id is not None
        return Response({
            'success': True,
            'message': 'Job created and assigned to worker' if assigned else 'Job posted successfully',
            'data': {
                'job_id': job.id,
                'status': job.status,
                'commission_details': commission,
            }
        }, status=status.HTTP_201_CREATED)


class JobDetailView(APIView):

    @swagger_auto_schema(
        operation_description="Retrieve a job with category, seeker and worker details.",
        responses={200: envelope_schema, 400: 'Invalid jobId', 404: 'Not Found'}
    )
    def get(self, request, job_id):
        # Some clients send ':23' instead of '23'.
        job_id = job_id.lstrip(':')
        if not JOB_ID_PATTERN.match(job_id):
            logger.warning(f"Rejected non-numeric job id {job_id!r}")
            return Response(
                {'success': False, 'message': 'Invalid jobId parameter. Use numeric id (e.g. /api/jobs/23)'},
                status=status.HTTP_400_BAD_REQUEST
            )

        job = (
            Job.objects.with_details()
            .select_related('seeker__seeker_profile', 'worker__worker_profile')
            .filter(pk=int(job_id))
            .first()
        )
        if job is None:
            return Response({'success': False, 'message': 'Job not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response({'success': True, 'data': JobDetailSerializer(job).data})


class JobApplyView(LifecycleMixin, APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Apply to an open job. quoted_price defaults to the job budget.",
        request_body=JobApplicationCreateSerializer,
        responses={
            201: envelope_schema, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden',
            404: 'Job not found or not available', 409: 'Already applied'
        }
    )
    def post(self, request, job_id):
        serializer = JobApplicationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = self.get_service().apply(
            worker=request.user,
            job_id=job_id,
            proposal_message=serializer.validated_data['proposal_message'],
            quoted_price=serializer.validated_data.get('quoted_price'),
        )
        return Response({
            'success': True,
            'message': 'Application submitted successfully',
            'data': {'application_id': application.id}
        }, status=status.HTTP_201_CREATED)


class JobApplicationsListView(APIView):
    permission_classes = [IsAuthenticated, IsSeeker]

    @swagger_auto_schema(
        operation_description="List applications for a job (seeker must own the job).",
        responses={200: JobApplicationSerializer(many=True), 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, job_id):
        if not Job.objects.filter(pk=job_id, seeker=request.user).exists():
            raise NotFoundOrUnauthorized('Job not found or unauthorized')

        applications = (
            JobApplication.objects.filter(job_id=job_id)
            .select_related('worker__worker_profile')
            .order_by('-created_at')
        )
        return Response({'success': True, 'data': JobApplicationSerializer(applications, many=True).data})


class AcceptApplicationView(LifecycleMixin, APIView):
    permission_classes = [IsAuthenticated, IsSeeker]

    @swagger_auto_schema(
        operation_description="Accept an application: assigns the worker, adopts the quoted price "
                              "as the budget and rejects every other application for the job.",
        request_body=openapi.Schema(type=openapi.TYPE_OBJECT, properties={}),
        responses={200: envelope_schema, 401: 'Unauthorized', 404: 'Not Found', 409: 'Conflict'}
    )
    def put(self, request, application_id):
        job, application = self.get_service().accept_application(request.user, application_id)
        return Response({
            'success': True,
            'message': 'Worker assigned successfully',
            'data': {'job_id': job.id, 'worker_id': application.worker_id}
        })


class JobStatusUpdateView(LifecycleMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Change job status (seeker or assigned worker). Allowed: "
                              "open->cancelled, assigned->in_progress|cancelled, "
                              "in_progress->completed|disputed, completed->disputed.",
        request_body=JobStatusUpdateSerializer,
        responses={200: envelope_schema, 400: 'Invalid transition', 401: 'Unauthorized', 404: 'Not Found'}
    )
    def put(self, request, job_id):
        serializer = JobStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        job = self.get_service().update_status(
            request.user,
            job_id,
            serializer.validated_data['status'],
            serializer.validated_data.get('completion_notes'),
        )
        return Response({
            'success': True,
            'message': f"Job status updated to {job.status}",
            'data': {'job_id': job.id, 'status': job.status}
        })


class JobCancelView(LifecycleMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Cancel a job that is not completed (seeker or assigned worker).",
        request_body=JobCancelSerializer,
        responses={200: envelope_schema, 400: 'Job already completed', 401: 'Unauthorized', 404: 'Not Found'}
    )
    def put(self, request, job_id):
        serializer = JobCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        self.get_service().cancel(request.user, job_id, serializer.validated_data.get('cancellation_reason'))
        return Response({'success': True, 'message': 'Job cancelled successfully'})


class MyJobsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Jobs where the caller is the worker (worker accounts) or the seeker.",
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
        responses={200: envelope_schema, 401: 'Unauthorized'}
    )
    def get(self, request):
        query = MyJobsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data
        page, limit, offset = paginate(filters.get('page', 1), filters.get('limit'))

        if request.user.user_type == UserType.WORKER:
            jobs = Job.objects.filter(worker=request.user)
        else:
            jobs = Job.objects.filter(seeker=request.user)
        if 'status' in filters:
            jobs = jobs.filter(status=filters['status'])

        jobs = jobs.with_details().order_by('-created_at', '-id')
        return paginated_response(jobs, page, limit, offset, JobSerializer)
