from django.conf import settings


def school(request):
    return {
        "school_name": settings.SCHOOL_NAME,
        "school_email": settings.SCHOOL_EMAIL,
        "school_phone": settings.SCHOOL_PHONE,
    }
