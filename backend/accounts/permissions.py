from rest_framework.permissions import BasePermission

from .models import User


def role_required(*roles: str) -> type[BasePermission]:
    """
    Build a permission class that admits authenticated users holding one of ``roles``.

    Views declare the role once in ``permission_classes`` instead of checking
    ``request.user.role`` inside each handler.
    """

    allowed_roles = frozenset(roles)

    class HasRole(BasePermission):
        message = "Forbidden"

        def has_permission(self, request, view):
            user = request.user
            if not user or not user.is_authenticated:
                return False
            return user.role in allowed_roles

    HasRole.__name__ = "HasRole_" + "_".join(sorted(allowed_roles))
    return HasRole


IsAdmin = role_required(User.ROLE_ADMIN)
IsVendor = role_required(User.ROLE_VENDOR)
