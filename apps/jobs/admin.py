from django.contrib import admin
from .models import Category, Job, JobApplication

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name',)

@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'seeker', 'worker', 'status', 'budget', 'commission_amount', 'created_at')
    list_filter = ('status', 'payment_status', 'category')
    search_fields = ('title', 'seeker__username', 'worker__username')
    # Lifecycle fields change only through the job service.
    readonly_fields = ('status', 'worker', 'commission_amount', 'completion_date')

@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ('job', 'worker', 'quoted_price', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('job__title', 'worker__username')
    readonly_fields = ('status',)
