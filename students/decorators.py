from functools import wraps

from django.contrib.auth.views import redirect_to_login
from django.http import Http404, HttpResponseForbidden

from accounts.models import User
from .permissions import parent_can_view_student


def require_parent_access_to_student(param: str = "student_id"):
    """
    Guard views that expose one student's record.

    The student id comes from the URL kwargs (``param``). Anonymous users are
    sent to login; users without a link get a 403. The resolved student is
    attached as ``request.student``.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return redirect_to_login(request.get_full_path())
            sid = kwargs.get(param)
            student = User.objects.students().select_related("school_class").filter(pk=sid).first()
            if student is None:
                raise Http404("Student not found")
            if not parent_can_view_student(request.user, student.pk):
                return HttpResponseForbidden("Not authorized")
            request.student = student
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
