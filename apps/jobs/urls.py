from django.urls import re_path
from .views import (
    JobListCreateView, JobDetailView, JobApplyView, JobApplicationsListView,
    AcceptApplicationView, JobStatusUpdateView, JobCancelView, MyJobsView,
)

# Trailing slashes are optional: clients call both /api/jobs/12/status and
# /api/jobs/12/status/, and a redirect would drop the PUT/POST body.
urlpatterns = [
    re_path(r'^my/jobs/?$', MyJobsView.as_view(), name='my_jobs'),
    re_path(
        r'^applications/(?P<application_id>\d+)/accept/?$',
        AcceptApplicationView.as_view(),
        name='accept_application'
    ),
    re_path(r'^(?P<job_id>\d+)/apply/?$', JobApplyView.as_view(), name='job_apply'),
    re_path(r'^(?P<job_id>\d+)/applications/?$', JobApplicationsListView.as_view(), name='job_applications'),
    re_path(r'^(?P<job_id>\d+)/status/?$', JobStatusUpdateView.as_view(), name='job_status_update'),
    re_path(r'^(?P<job_id>\d+)/cancel/?$', JobCancelView.as_view(), name='job_cancel'),
    re_path(r'^(?P<job_id>[^/]+)/?$', JobDetailView.as_view(), name='job_detail'),
]
