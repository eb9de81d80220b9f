from django.contrib import admin
from .models import User, WorkerProfile, SeekerProfile

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'mobile', 'user_type', 'is_active', 'is_verified')
    list_filter = ('user_type', 'is_active', 'is_verified')
    search_fields = ('username', 'email', 'mobile')

@admin.register(WorkerProfile)
class WorkerProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'full_name', 'profession', 'city', 'total_jobs_completed', 'total_earnings')
    list_filter = ('availability_status',)
    search_fields = ('user__username', 'user__email', 'full_name', 'profession')
    readonly_fields = ('total_jobs_completed', 'total_earnings')

@admin.register(SeekerProfile)
class SeekerProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'full_name', 'city', 'total_jobs_posted', 'total_amount_spent')
    search_fields = ('user__username', 'user__email', 'full_name')
    readonly_fields = ('total_jobs_posted', 'total_amount_spent')
