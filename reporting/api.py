import json
import logging
from functools import wraps

from django.http import JsonResponse

logger = logging.getLogger(__name__)

WRITE_METHODS = {"POST", "PUT", "PATCH"}
REQUIRED_CODES = {"required", "null", "blank"}
# code used by our own serializer checks; their messages are shown verbatim
RULE = "rule"


def ok(data=None, status: int = 200, message: str | None = None, **extra):
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return JsonResponse(body, status=status)


def fail(error: str, status: int = 400):
    return JsonResponse({"success": False, "error": error}, status=status)


def first_error(errors, field: str | None = None) -> str:
    """Flatten DRF serializer errors into one message naming the field."""
    if isinstance(errors, dict):
        for key, value in errors.items():
            name = field if key == "non_field_errors" else key
            return first_error(value, name)
        return "Invalid input"
    if isinstance(errors, list):
        return first_error(errors[0], field) if errors else "Invalid input"
    code = getattr(errors, "code", None)
    if code in REQUIRED_CODES and field:
        return f"{field} is required"
    if code == RULE or not field or field == "non_field_errors":
        return str(errors)
    return f"{field}: {errors}"


def _role_allowed(user, roles, method) -> bool:
    if roles is None:
        return True
    if isinstance(roles, dict):
        roles = roles.get(method, ())
    if not getattr(user, "is_authenticated", False):
        return False
    return getattr(user, "role", None) in roles


def json_endpoint(methods=("GET",), roles=None):
    """
    Wrap a function view in the JSON API conventions:
    method gating, role gating (401), JSON body parsing and a logged 500.

    ``roles`` is a tuple of roles, a dict of method -> roles, or None for a
    public endpoint. The parsed body is exposed as ``request.payload``.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if request.method not in methods:
                return fail("Method not allowed", 405)
            if not _role_allowed(request.user, roles, request.method):
                logger.warning(
                    "Unauthorized %s %s by user %s",
                    request.method,
                    request.path,
                    getattr(request.user, "pk", None),
                )
                return fail("Unauthorized", 401)
            request.payload = {}
            if request.method in WRITE_METHODS and request.body:
                try:
                    request.payload = json.loads(request.body)
                except (ValueError, UnicodeDecodeError):
                    return fail("Invalid JSON body", 400)
                if not isinstance(request.payload, dict):
                    return fail("Invalid JSON body", 400)
            try:
                return view_func(request, *args, **kwargs)
            except Exception:
                logger.exception("Unhandled error in %s %s", request.method, request.path)
                return fail("Internal server error", 500)
        return _wrapped
    return decorator


def generation(request):
    """Echo of the client's request-generation token, if it sent one."""
    value = request.GET.get("generation")
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None
