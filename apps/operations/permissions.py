from rest_framework import permissions

from .models import User


class IsManager(permissions.BasePermission):
    """
    Only managers may use the view. The denial message names the attempted action.
    """
    ACTION_MESSAGES = {
        'create': 'Permission denied. Only managers can invite users.',
        'update': 'Permission denied. Only managers can update users.',
        'partial_update': 'Permission denied. Only managers can update users.',
        'destroy': 'Permission denied. Only managers can delete users.',
    }
    message = 'Permission denied. Only managers can perform this action.'

    def has_permission(self, request, view):
        allowed = bool(request.user and request.user.is_authenticated and request.user.role == User.ROLE_MANAGER)
        if not allowed:
            self.message = self.ACTION_MESSAGES.get(getattr(view, 'action', None), IsManager.message)
        return allowed


class IsManagerOrReadOnly(permissions.BasePermission):
    message = 'Permission denied. Only managers can change this.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.is_manager


class HasWriteRole(permissions.BasePermission):
    """
    Any authenticated user can read; writes require one of ``view.write_roles``.
    """
    message = 'Permission denied. Your role cannot modify these records.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        write_roles = getattr(view, 'write_roles', (User.ROLE_MANAGER,))
        return request.user.role in write_roles


class IsManagerOrOwner(permissions.BasePermission):
    """
    Managers can change any record; everyone else only the records they created.
    """
    message = 'Permission denied. You can only change records you created.'

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        if request.user.is_manager:
            return True
        return getattr(obj, 'user_id', None) == request.user.pk
