"""
Role based permission classes.

Every class first requires an authenticated user, so a role check can
never run ahead of authentication.  Roles are read from the user loaded
for this request, not from the token.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from records.exceptions import Forbidden
from records.models import Role
from records.services.guard import AccessGuard

STAFF_ROLES = (Role.DOCTOR, Role.RECEPTIONIST)


def _authenticated_user(request):
    user = getattr(request, "user", None)
    if user and user.is_authenticated:
        return user
    return None


class RolePermission(BasePermission):
    """Allow access only to users holding one of ``roles``."""
    roles: tuple = ()
    message = Forbidden.default_detail

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = _authenticated_user(request)
        if user is None:
            return False
        try:
            if len(self.roles) == 1:
                AccessGuard.require_role(user, self.roles[0])
            else:
                AccessGuard.require_any_role(user, self.roles)
        except Forbidden:
            return False
        return True


class IsDoctor(RolePermission):
    """Doctors only."""
    roles = (Role.DOCTOR,)


class IsReceptionist(RolePermission):
    """Receptionists only."""
    roles = (Role.RECEPTIONIST,)


class IsStaff(RolePermission):
    """Any recognised staff role."""
    roles = STAFF_ROLES


class ReceptionistWritesStaffReads(BasePermission):
    """Reads for any staff role, writes for receptionists."""
    message = Forbidden.default_detail

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return IsStaff().has_permission(request, view)
        return IsReceptionist().has_permission(request, view)
