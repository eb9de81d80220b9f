from rest_framework import permissions
from core.constants import UserType


class IsSeeker(permissions.BasePermission):
    message = 'Access denied. Seeker account required.'

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.user_type == UserType.SEEKER


class IsWorker(permissions.BasePermission):
    message = 'Access denied. Worker account required.'

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.user_type == UserType.WORKER
