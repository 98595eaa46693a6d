import logging
from functools import wraps

from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.shortcuts import redirect

logger = logging.getLogger(__name__)


def role_required(*roles, fallback: str = "dashboard:index"):
    """
    Guard server-rendered pages by role.

    Anonymous users go to the login page; signed-in users with another role
    are sent to ``fallback`` with a banner.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            user = request.user
            if not user.is_authenticated:
                return redirect_to_login(request.get_full_path())
            if user.role not in roles:
                logger.warning(
                    "Permission denied: user %s (%s) on %s", user.pk, user.role, request.path
                )
                messages.error(request, "You do not have access to that page.")
                return redirect(fallback)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


admin_required = role_required("ADMIN")
