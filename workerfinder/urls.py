from django.contrib import admin
from django.urls import path, re_path, include
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

from apps.jobs.views import JobListCreateView

schema_view = get_schema_view(
    openapi.Info(
        title="Worker Finder API",
        default_version='v1',
        description="Marketplace API connecting seekers with workers",
    ),
    public=True,
)

urlpatterns = [
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('admin/', admin.site.urls),
    re_path(r'^api/jobs/?$', JobListCreateView.as_view(), name='job_list_create'),
    path('api/jobs/', include('apps.jobs.urls')),
]

handler404 = 'core.exceptions.not_found_handler'
