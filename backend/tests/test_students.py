"""
Integration tests for the roster, subject catalog and record-entry endpoints.
"""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_and_list_students(client: AsyncClient):
    for name in ("Yaw Asante", "Abena Owusu"):
        response = await client.post(
            "/api/v1/students", json={"name": name, "class_name": "JHS 1"},
        )
        assert response.status_code == 201

    response = await client.get("/api/v1/students")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Abena Owusu", "Yaw Asante"]


@pytest.mark.asyncio
async def test_create_student_requires_name(client: AsyncClient):
    response = await client.post("/api/v1/students", json={"name": "", "class_name": "JHS 1"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_subject_rejects_duplicates(client: AsyncClient):
    first = await client.post("/api/v1/subjects", json={"name": "Science"})
    second = await client.post("/api/v1/subjects", json={"name": "Science"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert "already exists" in second.json()["detail"]


@pytest.mark.asyncio
async def test_list_subjects(client: AsyncClient, test_subjects):
    response = await client.get("/api/v1/subjects")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["English", "Math"]


# --- Scores ---

@pytest.mark.asyncio
async def test_upsert_score_replaces_existing_entry(client: AsyncClient, test_student, test_subjects):
    """A second PUT for the same subject updates the row instead of adding one."""
    url = f"/api/v1/students/{test_student.id}/scores"
    math_id = str(test_subjects["Math"].id)

    response = await client.put(url, json={"subject_id": math_id, "class_score": 40, "exam_score": 45.5})

    assert response.status_code == 200
    assert response.json()["total"] == 85.5

    report = (await client.get(f"/api/v1/students/{test_student.id}/report")).json()
    math_rows = [s for s in report["scores"] if s["subject_name"] == "Math"]
    assert len(math_rows) == 1
    assert math_rows[0]["class_score"] == 40
    assert math_rows[0]["exam_score"] == 45.5
    assert report["grand_total"] == 130.5


@pytest.mark.asyncio
async def test_upsert_score_creates_new_entry(client: AsyncClient, test_subjects):
    student = (await client.post(
        "/api/v1/students", json={"name": "Yaw Asante", "class_name": "JHS 1"},
    )).json()

    response = await client.put(
        f"/api/v1/students/{student['id']}/scores",
        json={"subject_id": str(test_subjects["English"].id), "class_score": 50, "exam_score": 0},
    )

    assert response.status_code == 200
    assert response.json()["total"] == 50


@pytest.mark.asyncio
@pytest.mark.parametrize("class_score, exam_score", [(-1, 10), (50.01, 10), (10, 51)])
async def test_upsert_score_enforces_bounds(
    client: AsyncClient, test_student, test_subjects, class_score, exam_score,
):
    response = await client.put(
        f"/api/v1/students/{test_student.id}/scores",
        json={
            "subject_id": str(test_subjects["Math"].id),
            "class_score": class_score,
            "exam_score": exam_score,
        },
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upsert_score_unknown_subject(client: AsyncClient, test_student):
    response = await client.put(
        f"/api/v1/students/{test_student.id}/scores",
        json={"subject_id": str(uuid.uuid4()), "class_score": 10, "exam_score": 10},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Subject not found"


@pytest.mark.asyncio
async def test_upsert_score_unknown_student(client: AsyncClient, test_subjects):
    response = await client.put(
        f"/api/v1/students/{uuid.uuid4()}/scores",
        json={"subject_id": str(test_subjects["Math"].id), "class_score": 10, "exam_score": 10},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Student not found"


# --- Attendance and comments ---

@pytest.mark.asyncio
async def test_upsert_attendance(client: AsyncClient, test_student):
    url = f"/api/v1/students/{test_student.id}/attendance"
    response = await client.put(url, json={"present_days": 85, "total_days": 90})

    assert response.status_code == 200
    assert response.json()["present_days"] == 85

    report = (await client.get(f"/api/v1/students/{test_student.id}/report")).json()
    assert report["attendance"] == {"present_days": 85, "total_days": 90}


@pytest.mark.asyncio
async def test_attendance_present_cannot_exceed_total(client: AsyncClient, test_student):
    response = await client.put(
        f"/api/v1/students/{test_student.id}/attendance",
        json={"present_days": 91, "total_days": 90},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upsert_comments(client: AsyncClient, test_rival):
    url = f"/api/v1/students/{test_rival.id}/comments"
    first = await client.put(url, json={"conduct": "Polite", "interest": "Music"})
    second = await client.put(url, json={"conduct": "Very polite", "interest": "Music"})

    assert first.status_code == second.status_code == 200
    report = (await client.get(f"/api/v1/students/{test_rival.id}/report")).json()
    assert report["comments"]["conduct"] == "Very polite"
    assert report["comments"]["behavior"] is None


@pytest.mark.asyncio
async def test_upsert_score_rejects_nan(client: AsyncClient, test_student, test_subjects):
    """A bare NaN literal parses as JSON but is not a score."""
    body = '{"subject_id": "%s", "class_score": NaN, "exam_score": 10}' % test_subjects["Math"].id
    response = await client.put(
        f"/api/v1/students/{test_student.id}/scores",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert "finite" in response.text

    report = (await client.get(f"/api/v1/students/{test_student.id}/report")).json()
    math_rows = [s for s in report["scores"] if s["subject_name"] == "Math"]
    assert math_rows[0]["class_score"] == 30


# --- Edit and delete ---

@pytest.mark.asyncio
async def test_update_student(client: AsyncClient, test_student):
    response = await client.patch(
        f"/api/v1/students/{test_student.id}", json={"class_name": "JHS 3"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Ama Mensah"
    assert data["class_name"] == "JHS 3"

    report = (await client.get(f"/api/v1/students/{test_student.id}/report")).json()
    assert report["student"]["class"] == "JHS 3"


@pytest.mark.asyncio
async def test_update_student_rejects_blank_name(client: AsyncClient, test_student):
    response = await client.patch(f"/api/v1/students/{test_student.id}", json={"name": "   "})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_unknown_student(client: AsyncClient):
    response = await client.patch(f"/api/v1/students/{uuid.uuid4()}", json={"name": "Yaw"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_student_removes_records(client: AsyncClient, test_student, test_rival):
    response = await client.delete(f"/api/v1/students/{test_student.id}")

    assert response.status_code == 200
    assert response.json()["student_id"] == str(test_student.id)

    assert (await client.get(f"/api/v1/students/{test_student.id}/report")).status_code == 404
    rankings = (await client.get("/api/v1/rankings")).json()
    assert [r["name"] for r in rankings] == ["Kofi Boateng"]
    stats = (await client.get("/api/v1/stats")).json()
    assert stats == {"students": 1, "subjects": 2, "scores": 2}


@pytest.mark.asyncio
async def test_delete_unknown_student(client: AsyncClient):
    response = await client.delete(f"/api/v1/students/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_subject_removes_its_scores(client: AsyncClient, test_student, test_subjects):
    response = await client.delete(f"/api/v1/subjects/{test_subjects['Math'].id}")

    assert response.status_code == 200
    subjects = (await client.get("/api/v1/subjects")).json()
    assert [s["name"] for s in subjects] == ["English"]

    report = (await client.get(f"/api/v1/students/{test_student.id}/report")).json()
    assert [s["subject_name"] for s in report["scores"]] == ["English"]
    assert report["grand_total"] == 45.0


@pytest.mark.asyncio
async def test_delete_unknown_subject(client: AsyncClient):
    response = await client.delete(f"/api/v1/subjects/{uuid.uuid4()}")
    assert response.status_code == 404
