from django.conf import settings
from rest_framework import serializers
from .models import Job, JobApplication, Category
from core.constants import JobStatus, REQUESTABLE_JOB_STATUSES


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'icon']


class JobCreateSerializer(serializers.Serializer):
    title = serializers.CharField(
        min_length=5, max_length=255,
        error_messages={'min_length': 'Title is required (5-255 characters)'}
    )
    description = serializers.CharField(
        min_length=10, max_length=2000,
        error_messages={'min_length': 'Description is required (10-2000 characters)'}
    )
    budget = serializers.DecimalField(max_digits=10, decimal_places=2)
    location = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    latitude = serializers.DecimalField(
        max_digits=10, decimal_places=8, min_value=-90, max_value=90, required=False, allow_null=True
    )
    longitude = serializers.DecimalField(
        max_digits=11, decimal_places=8, min_value=-180, max_value=180, required=False, allow_null=True
    )
    scheduled_date = serializers.DateTimeField(required=False, allow_null=True)
    category_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    worker_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate_budget(self, value):
        if value < settings.MIN_JOB_BUDGET:
            raise serializers.ValidationError(f"Budget must be at least {settings.MIN_JOB_BUDGET}")
        return value


class JobApplicationCreateSerializer(serializers.Serializer):
    proposal_message = serializers.CharField(
        min_length=20, max_length=1000,
        error_messages={'min_length': 'Proposal message is required (20-1000 characters)'}
    )
    quoted_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)

    def validate_quoted_price(self, value):
        if value is not None and value < settings.MIN_JOB_BUDGET:
            raise serializers.ValidationError(f"Quoted price must be at least {settings.MIN_JOB_BUDGET}")
        return value


class JobStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in REQUESTABLE_JOB_STATUSES])
    completion_notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)


class JobCancelSerializer(serializers.Serializer):
    cancellation_reason = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)


class JobListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=JobStatus.choices, required=False)
    category_id = serializers.IntegerField(min_value=1, required=False)
    min_budget = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    max_budget = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    radius = serializers.FloatField(min_value=0, required=False)
    page = serializers.CharField(required=False)
    limit = serializers.CharField(required=False)

    def validate(self, data):
        if ('latitude' in data) != ('longitude' in data):
            raise serializers.ValidationError("latitude and longitude must be provided together.")
        if 'min_budget' in data and 'max_budget' in data and data['min_budget'] > data['max_budget']:
            raise serializers.ValidationError("min_budget cannot exceed max_budget.")
        return data


class MyJobsQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=JobStatus.choices, required=False)
    page = serializers.CharField(required=False)
    limit = serializers.CharField(required=False)


class JobSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(read_only=True, default=None)
    seeker_name = serializers.CharField(read_only=True, default=None)
    seeker_photo = serializers.CharField(read_only=True, default=None)
    seeker_city = serializers.CharField(read_only=True, default=None)
    worker_name = serializers.CharField(read_only=True, default=None)
    worker_photo = serializers.CharField(read_only=True, default=None)
    distance = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            'id', 'seeker_id', 'worker_id', 'category_id', 'title', 'description', 'budget',
            'location', 'latitude', 'longitude', 'status', 'scheduled_date', 'completion_date',
            'payment_status', 'commission_amount', 'created_at', 'updated_at',
            'category_name', 'seeker_name', 'seeker_photo', 'seeker_city', 'worker_name', 'worker_photo',
            'distance',
        ]
        read_only_fields = fields

    def get_distance(self, obj):
        distance = getattr(obj, 'distance', None)
        return round(distance, 2) if distance is not None else 0


class JobDetailSerializer(JobSerializer):
    seeker_mobile = serializers.CharField(source='seeker.mobile', read_only=True, default=None)
    seeker_address = serializers.SerializerMethodField()
    worker_mobile = serializers.SerializerMethodField()
    worker_profession = serializers.SerializerMethodField()
    worker_experience = serializers.SerializerMethodField()

    class Meta(JobSerializer.Meta):
        fields = [f for f in JobSerializer.Meta.fields if f != 'distance'] + [
            'seeker_mobile', 'seeker_address', 'worker_mobile', 'worker_profession', 'worker_experience',
        ]
        read_only_fields = fields

    def _worker_profile(self, obj):
        if obj.worker is None:
            return None
        return getattr(obj.worker, 'worker_profile', None)

    def get_seeker_address(self, obj):
        profile = getattr(obj.seeker, 'seeker_profile', None)
        return profile.address if profile else None

    def get_worker_mobile(self, obj):
        return obj.worker.mobile if obj.worker else None

    def get_worker_profession(self, obj):
        profile = self._worker_profile(obj)
        return profile.profession if profile else None

    def get_worker_experience(self, obj):
        profile = self._worker_profile(obj)
        return profile.experience_years if profile else None


class JobApplicationSerializer(serializers.ModelSerializer):
    worker_name = serializers.CharField(source='worker.worker_profile.full_name', read_only=True, default=None)
    worker_photo = serializers.CharField(source='worker.worker_profile.profile_photo', read_only=True, default=None)
    profession = serializers.CharField(source='worker.worker_profile.profession', read_only=True, default=None)
    experience_years = serializers.DecimalField(
        source='worker.worker_profile.experience_years', max_digits=4, decimal_places=1,
        read_only=True, default=None
    )
    average_rating = serializers.DecimalField(
        source='worker.worker_profile.average_rating', max_digits=3, decimal_places=2,
        read_only=True, default=None
    )
    total_jobs_completed = serializers.IntegerField(
        source='worker.worker_profile.total_jobs_completed', read_only=True, default=None
    )
    worker_mobile = serializers.CharField(source='worker.mobile', read_only=True, default=None)

    class Meta:
        model = JobApplication
        fields = [
            'id', 'job_id', 'worker_id', 'proposal_message', 'quoted_price', 'status',
            'created_at', 'updated_at', 'worker_name', 'worker_photo', 'profession',
            'experience_years', 'average_rating', 'total_jobs_completed', 'worker_mobile',
        ]
        read_only_fields = fields
