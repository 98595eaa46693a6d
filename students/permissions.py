import logging
from .models import ParentStudentLink

logger = logging.getLogger(__name__)


def parent_can_view_student(user, student_id) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    if user.role == "ADMIN":
        return True
    if user.role == "STUDENT":
        return str(user.pk) == str(student_id)
    has_link = ParentStudentLink.objects.filter(
        user=user, student_id=student_id, active=True
    ).exists()
    if not has_link:
        logger.warning("Permission denied: user %s has no active link to student %s", user.pk, student_id)
    return has_link
