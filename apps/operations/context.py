"""
Per-request caller identity.

Every mutation routine receives a RequestContext built once from the
authenticated request instead of reading the user from ambient state.
"""
from dataclasses import dataclass
from typing import Any, Optional

from rest_framework import serializers
from rest_framework.exceptions import PermissionDenied

from .models import User

NO_ASSIGNED_SHED_MESSAGE = 'Action denied. You have not been assigned to a shed.'


@dataclass(frozen=True)
class RequestContext:
    user: Any
    role: str
    display_name: str
    assigned_shed: Optional[str] = None

    @classmethod
    def from_request(cls, request) -> 'RequestContext':
        user = request.user
        return cls(
            user=user,
            role=getattr(user, 'role', User.ROLE_WORKER),
            display_name=getattr(user, 'display_name', None) or 'System',
            assigned_shed=getattr(user, 'assigned_shed', None) or None,
        )

    @property
    def is_worker(self) -> bool:
        return self.role == User.ROLE_WORKER

    def resolve_shed(self, submitted: Optional[str]) -> str:
        """
        Return the shed a record must be written against.

        Workers always write to their assigned shed whatever they submitted;
        everyone else must name a shed explicitly.
        """
        if self.is_worker:
            if not self.assigned_shed:
                raise PermissionDenied(NO_ASSIGNED_SHED_MESSAGE)
            return self.assigned_shed
        if not submitted:
            raise serializers.ValidationError({'shed': ['This field is required.']})
        return submitted
