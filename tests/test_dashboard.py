from unittest import mock

import pytest
from django.urls import reverse

from dashboard import services
from dashboard.strategies import ParentDashboard, StudentDashboard, TeacherDashboard, strategy_for
from students.models import ParentStudentLink

pytestmark = pytest.mark.django_db


@pytest.fixture
def linked_parent(parent, student):
    ParentStudentLink.objects.create(user=parent, student=student, relationship="Mother")
    return parent


def test_strategy_per_role(teacher, student, parent, admin):
    assert isinstance(strategy_for(teacher), TeacherDashboard)
    assert isinstance(strategy_for(student), StudentDashboard)
    assert isinstance(strategy_for(parent), ParentDashboard)
    assert strategy_for(admin).template == "dashboard/index.html"


@pytest.mark.parametrize(
    "role_fixture, template",
    [
        ("teacher", "dashboard/teacher.html"),
        ("student", "dashboard/student.html"),
        ("parent", "dashboard/parent.html"),
    ],
)
def test_dashboard_renders_role_template(request, login, school_class, role_fixture, template):
    user = request.getfixturevalue(role_fixture)
    response = login(user).get(reverse("dashboard:index"))
    assert response.status_code == 200
    assert template in [t.name for t in response.templates]
    assert response.context["role"] == user.role


def test_student_dashboard_without_results_shows_na(login, student):
    response = login(student).get(reverse("dashboard:index"))
    cards = {card["label"]: card["value"] for card in response.context["cards"]}
    assert cards["Average Score"] == "N/A"
    assert cards["Grade"] == "N/A"


def test_teacher_dashboard_counts_classes(teacher, student):
    ctx = TeacherDashboard(teacher).context()
    assert [c.pk for c in ctx["classes"]] == [student.school_class_id]
    assert ctx["classes"][0].student_count == 1


def test_parent_dashboard_lists_linked_children(linked_parent, student):
    ctx = ParentDashboard(linked_parent).context()
    assert [s["student"].pk for s in ctx["children"]] == [student.pk]
    assert ctx["children"][0]["average"] is None
    assert ctx["children"][0]["attendance"] is None


def test_parent_dashboard_loads_events_once(linked_parent):
    with mock.patch("content.services.upcoming_events", return_value=["Sports Day"]) as events:
        ctx = ParentDashboard(linked_parent).context()
    events.assert_called_once_with()
    assert ctx["events"] == ["Sports Day"]
    assert ctx["cards"][2] == {"label": "Upcoming Events", "value": 1, "hint": ""}


def test_admin_is_sent_to_management_overview(login, admin):
    response = login(admin).get(reverse("dashboard:index"))
    assert response.status_code == 302
    assert response.url == reverse("dashboard:admin_overview")


def test_anonymous_user_goes_to_login(client):
    response = client.get(reverse("dashboard:admin_overview"))
    assert response.status_code == 302
    assert reverse("account_login") in response.url


def test_non_admin_is_bounced_from_management(login, teacher):
    response = login(teacher).get(reverse("dashboard:finance"))
    assert response.status_code == 302
    assert response.url == reverse("dashboard:index")


def test_child_page_access(login, linked_parent, parent, student, make_user):
    client = login(linked_parent)
    url = reverse("dashboard:child", args=[student.pk])
    response = client.get(url)
    assert response.status_code == 200
    assert response.context["performance"]["status"] == "insufficient_data"

    assert client.get(reverse("dashboard:child", args=[999999])).status_code == 404

    stranger = make_user("PARENT")
    assert login(stranger).get(url).status_code == 403


def test_admin_overview_with_empty_school(admin):
    overview = services.admin_overview()
    assert overview["stats"]["averageAttendance"] == 0
    assert overview["stats"]["monthlyRevenue"] == 0.0
    assert overview["stats"]["totalStudents"] == 0
    assert overview["upcomingEvents"] == []


@pytest.mark.parametrize("name", ["admin_overview", "students", "results", "finance", "admissions"])
def test_management_pages_render(login, admin, student, exam, name):
    response = login(admin).get(reverse(f"dashboard:{name}"))
    assert response.status_code == 200


def test_admissions_page_ignores_unknown_period(login, admin):
    response = login(admin).get(reverse("dashboard:admissions"), {"period": "forever"})
    assert response.context["period"] == "thisYear"


def test_results_page_with_malformed_class_filter(login, admin, exam):
    response = login(admin).get(reverse("dashboard:results"), {"classId": "abc"})
    assert response.status_code == 200
    assert response.context["summary"]["totalExams"] == 0
    assert response.context["selected_class"] == "abc"


def test_results_page_filters_by_class(login, admin, exam):
    response = login(admin).get(reverse("dashboard:results"), {"classId": str(exam.school_class_id)})
    assert response.status_code == 200
    assert response.context["summary"]["totalExams"] == 1
