from datetime import timedelta

from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, assert_error


def test_domain_answers_and_completed_users(client: TestClient, student, staff, auth_headers, active_test,
                                            set_now, now):
    domain = active_test.domains[0]
    question = [q for q in domain.questions if q.section == "A"][0]
    student_headers = auth_headers(student)

    api_call(client, "POST", f"/tests/{active_test.id}/start", headers=student_headers,
             json={"domain_id": domain.id, "section": "A"})
    api_call(client, "POST", "/student-answers/submit", headers=student_headers, json={
        "question_id": question.id,
        "domain_id": domain.id,
        "section": "A",
        "exam_start_time": now.isoformat(),
        "answer_text": "done",
        "test_id": active_test.id,
    })
    set_now(now + timedelta(minutes=20))
    api_call(client, "POST", f"/tests/{active_test.id}/submit", headers=student_headers)

    staff_headers = auth_headers(staff)
    r = api_call(client, "GET", f"/domains/{domain.id}/answers?test_id={active_test.id}", headers=staff_headers)
    groups = r.json()["data"]
    assert len(groups) == 1
    assert groups[0]["student"]["id"] == student.id
    assert [a["answer_text"] for a in groups[0]["sections"]["A"]] == ["done"]

    r = api_call(client, "GET", f"/domains/{domain.id}/completed-users", headers=staff_headers)
    users = r.json()["data"]
    assert [u["student"]["id"] for u in users] == [student.id]
    assert users[0]["test"]["id"] == active_test.id


def test_domain_views_require_staff(client: TestClient, student, auth_headers, domain_factory):
    domain = domain_factory()
    r = client.get(f"/domains/{domain.id}/answers", headers=auth_headers(student))
    assert_error(r, 403, "FORBIDDEN")


def test_unknown_domain(client: TestClient, admin, auth_headers):
    r = client.get("/domains/9999/completed-users", headers=auth_headers(admin))
    assert_error(r, 404, "NOT_FOUND")


def test_domain_tests_listing(client: TestClient, staff, student, auth_headers, make_test, domain_factory):
    domain = domain_factory()
    current = make_test([domain], title="Current")
    upcoming = make_test([domain], start_offset=timedelta(days=1), end_offset=timedelta(days=2), title="Upcoming")
    make_test([domain_factory()], title="Elsewhere")

    r = api_call(client, "GET", f"/domains/{domain.id}/tests", headers=auth_headers(staff))
    tests = r.json()["data"]
    assert [t["id"] for t in tests] == [upcoming.id, current.id]
    assert [t["status"] for t in tests] == ["upcoming", "active"]

    r = client.get(f"/domains/{domain.id}/tests", headers=auth_headers(student))
    assert_error(r, 403, "FORBIDDEN")

    r = client.get("/domains/9999/tests", headers=auth_headers(staff))
    assert_error(r, 404, "NOT_FOUND")
