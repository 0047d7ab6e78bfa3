"""
API tests: bearer-token actors, routing and error mapping
"""
import uuid

import httpx
import pytest
import pytest_asyncio
from jose import jwt

from app.database import get_db
from app.main import app


def token_for(actor, token_type="access"):
    payload = {"user_id": str(actor.id), "role": actor.role.value, "type": token_type}
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def auth(actor):
    return {"Authorization": f"Bearer {token_for(actor)}"}


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def _published_assignment(client, teacher, max_score=100):
    response = await client.post(
        "/teacher/assignment/create-assignment",
        json={"title": "Essay", "max_score": max_score},
        headers=auth(teacher),
    )
    assert response.status_code == 201
    assignment_id = response.json()["id"]

    response = await client.post(
        f"/teacher/assignment/publish-assignment/{assignment_id}",
        headers=auth(teacher),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "open"
    return assignment_id


async def _submit(client, student, assignment_id, content="answer"):
    response = await client.post(
        f"/student/assignment-submission/submit-assignment/{assignment_id}",
        json={"content": content, "attachments": []},
        headers=auth(student),
    )
    assert response.status_code == 200
    return response.json()["id"]


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get(f"/teacher/assignment/assignment-stats/{uuid.uuid4()}")
        assert response.status_code in [401, 403]

    @pytest.mark.asyncio
    async def test_refresh_token_rejected(self, client, teacher):
        headers = {"Authorization": f"Bearer {token_for(teacher, token_type='refresh')}"}
        response = await client.get(f"/teacher/assignment/assignment-stats/{uuid.uuid4()}", headers=headers)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_garbage_token_rejected(self, client):
        headers = {"Authorization": "Bearer not-a-jwt"}
        response = await client.get(f"/teacher/assignment/assignment-stats/{uuid.uuid4()}", headers=headers)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_student_blocked_from_teacher_routes(self, client, student):
        response = await client.get(f"/teacher/assignment/assignment-stats/{uuid.uuid4()}", headers=auth(student))
        assert response.status_code == 403


class TestGradingFlow:
    @pytest.mark.asyncio
    async def test_submit_grade_and_read_stats(self, client, teacher, make_students):
        assignment_id = await _published_assignment(client, teacher)
        students = make_students(2)
        first = await _submit(client, students[0], assignment_id)
        await _submit(client, students[1], assignment_id)

        response = await client.patch(
            f"/teacher/assignment-submission/grade-submission/{first}",
            json={"score": 92, "comment": "Excellent"},
            headers=auth(teacher),
        )
        assert response.status_code == 200
        stats = response.json()
        assert stats["graded_count"] == 1
        assert stats["total"] == 2
        assert stats["distribution"] == [1, 0, 0, 0, 0]
        assert stats["avg_score_display"] == 92.0

        response = await client.get(
            f"/teacher/assignment-submission/list-submissions/{assignment_id}",
            headers=auth(teacher),
        )
        assert response.status_code == 200
        assert len(response.json()) == 2

        response = await client.get(
            f"/student/assignment-submission/submission/{first}",
            headers=auth(students[0]),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "graded"
        assert body["score"] == 92
        assert body["graded_by"] == str(teacher.id)

    @pytest.mark.asyncio
    async def test_batch_grade(self, client, teacher, make_students):
        assignment_id = await _published_assignment(client, teacher)
        ids = [await _submit(client, s, assignment_id) for s in make_students(2)]

        response = await client.patch(
            f"/teacher/assignment-submission/batch-grade/{assignment_id}",
            json={"submission_ids": ids, "score": 70},
            headers=auth(teacher),
        )
        assert response.status_code == 200
        assert response.json()["graded_count"] == 2

        response = await client.post(
            f"/teacher/assignment/close-assignment/{assignment_id}",
            headers=auth(teacher),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "closed"


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_score_out_of_range_is_422(self, client, teacher, student):
        assignment_id = await _published_assignment(client, teacher, max_score=10)
        submission_id = await _submit(client, student, assignment_id)

        response = await client.patch(
            f"/teacher/assignment-submission/grade-submission/{submission_id}",
            json={"score": 11},
            headers=auth(teacher),
        )
        assert response.status_code == 422
        assert "between 0 and 10" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_non_owner_grade_is_403(self, client, teacher, other_teacher, student):
        assignment_id = await _published_assignment(client, teacher)
        submission_id = await _submit(client, student, assignment_id)

        response = await client.patch(
            f"/teacher/assignment-submission/grade-submission/{submission_id}",
            json={"score": 50},
            headers=auth(other_teacher),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_reading_someone_elses_submission_is_403(self, client, teacher, student, other_student):
        assignment_id = await _published_assignment(client, teacher)
        submission_id = await _submit(client, other_student, assignment_id)

        response = await client.get(
            f"/student/assignment-submission/submission/{submission_id}",
            headers=auth(student),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_submission_is_404(self, client, teacher):
        response = await client.patch(
            f"/teacher/assignment-submission/grade-submission/{uuid.uuid4()}",
            json={"score": 1},
            headers=auth(teacher),
        )
        assert response.status_code == 404
        assert response.json() == {"detail": "Submission not found"}

    @pytest.mark.asyncio
    async def test_invalid_max_score_rejected(self, client, teacher):
        response = await client.post(
            "/teacher/assignment/create-assignment",
            json={"title": "Broken", "max_score": 0},
            headers=auth(teacher),
        )
        assert response.status_code == 422


class TestReadEndpoints:
    @pytest.mark.asyncio
    async def test_student_lists_and_reads_assignments(self, client, teacher, student):
        assignment_id = await _published_assignment(client, teacher)
        await _submit(client, student, assignment_id)

        response = await client.get("/student/assignment/assignments", headers=auth(student))
        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [assignment_id]

        response = await client.get(f"/student/assignment/assignment/{assignment_id}", headers=auth(student))
        assert response.status_code == 200
        assert response.json()["submitted_count"] == 1

    @pytest.mark.asyncio
    async def test_my_assignment_submissions(self, client, teacher, student, other_student):
        assignment_id = await _published_assignment(client, teacher)
        own_id = await _submit(client, student, assignment_id)
        await _submit(client, other_student, assignment_id)

        response = await client.get("/student/assignment-submission/my-assignment-submissions", headers=auth(student))
        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [own_id]

    @pytest.mark.asyncio
    async def test_teacher_lists_and_updates(self, client, teacher, other_teacher):
        assignment_id = await _published_assignment(client, teacher)

        response = await client.get("/teacher/assignment/my-assignments", headers=auth(teacher))
        assert [a["id"] for a in response.json()] == [assignment_id]

        response = await client.get("/teacher/assignment/my-assignments", headers=auth(other_teacher))
        assert response.json() == []

        response = await client.put(
            f"/teacher/assignment/update-assignment/{assignment_id}",
            json={"title": "Essay (revised)"},
            headers=auth(teacher),
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Essay (revised)"

        response = await client.put(
            f"/teacher/assignment/update-assignment/{assignment_id}",
            json={"max_score": 50},
            headers=auth(teacher),
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_admin_submission_needs_student(self, client, teacher, admin, student):
        assignment_id = await _published_assignment(client, teacher)

        response = await client.post(
            f"/student/assignment-submission/submit-assignment/{assignment_id}",
            json={"content": "on behalf"},
            headers=auth(admin),
        )
        assert response.status_code == 422

        response = await client.post(
            f"/student/assignment-submission/submit-assignment/{assignment_id}",
            json={"content": "on behalf", "student_id": str(student.id)},
            headers=auth(admin),
        )
        assert response.status_code == 200
        assert response.json()["student_id"] == str(student.id)
