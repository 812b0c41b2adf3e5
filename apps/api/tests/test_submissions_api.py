from __future__ import annotations

import uuid
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from aawaaj_admin.models.audit import AuditLog
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.models.submission import Submission, SubmissionStatus, SubmissionType
from aawaaj_admin.security.roles import Role

from conftest import auth_headers


@pytest.fixture()
def submissions(db_session: Session) -> dict[str, Submission]:
    rows = {
        "east_report": Submission(
            submission_type=SubmissionType.VICTIM_REPORT,
            full_name="Asha Rao",
            email="asha@mail.test",
            region="East",
            details="Needs help",
        ),
        "east_application": Submission(
            submission_type=SubmissionType.VOLUNTEER_APPLICATION,
            full_name="Bina Das",
            email="bina@mail.test",
            region="East",
        ),
        "west_report": Submission(
            submission_type=SubmissionType.VICTIM_REPORT,
            full_name="Chitra West",
            email="chitra@mail.test",
            region="West",
        ),
    }
    db_session.add_all(rows.values())
    db_session.commit()
    return rows


def _audit_entries(db_session: Session) -> list[AuditLog]:
    return list(db_session.scalars(select(AuditLog)).all())


def test_victim_report_status_update_is_audited(
    client: TestClient,
    db_session: Session,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
) -> None:
    head = add_profile(Role.REGIONAL_HEAD, "East")
    report = submissions["east_report"]

    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(report.id), "status": "In-Progress"},
        headers=auth_headers(head.id),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "In-Progress"
    db_session.refresh(report)
    assert report.status == SubmissionStatus.IN_PROGRESS
    entries = _audit_entries(db_session)
    assert len(entries) == 1
    assert entries[0].action == "UPDATE_SUBMISSION_STATUS"
    assert entries[0].admin_id == head.id
    assert entries[0].event_metadata["submission_id"] == str(report.id)
    assert entries[0].event_metadata["status"] == "In-Progress"


def test_volunteer_application_status_update_is_rejected(
    client: TestClient,
    db_session: Session,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
) -> None:
    president = add_profile(Role.PRESIDENT, None)
    application = submissions["east_application"]

    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(application.id), "status": "Resolved"},
        headers=auth_headers(president.id),
    )

    assert response.status_code == 400
    assert response.json()["code"] == "submission_status_not_applicable"
    db_session.refresh(application)
    assert application.status == SubmissionStatus.NEW
    assert _audit_entries(db_session) == []


def test_out_of_region_submission_is_not_found(
    client: TestClient,
    db_session: Session,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
) -> None:
    head = add_profile(Role.UNIVERSITY_PRESIDENT, "East")
    west_report = submissions["west_report"]

    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(west_report.id), "status": "Resolved"},
        headers=auth_headers(head.id),
    )

    assert response.status_code == 404
    db_session.refresh(west_report)
    assert west_report.status == SubmissionStatus.NEW
    assert _audit_entries(db_session) == []


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "Resolved"},
        {"submissionId": "placeholder"},
        {},
    ],
)
def test_status_update_requires_both_fields(
    client: TestClient,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
    payload: dict[str, str],
) -> None:
    president = add_profile(Role.PRESIDENT, None)
    if payload.get("submissionId") == "placeholder":
        payload = {"submissionId": str(submissions["east_report"].id)}

    response = client.post("/api/admin/submissions/status", json=payload, headers=auth_headers(president.id))

    assert response.status_code == 400
    assert response.json()["message"] == "Submission ID and status are required"


def test_unknown_submission_is_not_found(client: TestClient, add_profile: Callable[..., Profile]) -> None:
    president = add_profile(Role.PRESIDENT, None)

    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(uuid.uuid4()), "status": "Resolved"},
        headers=auth_headers(president.id),
    )

    assert response.status_code == 404


def test_volunteer_cannot_update_status(
    client: TestClient,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
) -> None:
    volunteer = add_profile(Role.VOLUNTEER, "East")

    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(submissions["east_report"].id), "status": "Resolved"},
        headers=auth_headers(volunteer.id),
    )

    assert response.status_code == 401


def test_submission_list_is_region_scoped_and_searchable(
    client: TestClient,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
) -> None:
    head = add_profile(Role.REGIONAL_HEAD, "East")
    president = add_profile(Role.PRESIDENT, None)

    scoped = client.get("/admin/submissions", headers=auth_headers(head.id))
    searched = client.get("/admin/submissions", params={"q": "chitra"}, headers=auth_headers(head.id))
    everything = client.get("/admin/submissions", headers=auth_headers(president.id))

    assert scoped.status_code == 200
    assert {row["region"] for row in scoped.json()["submissions"]} == {"East"}
    assert scoped.json()["scope"] == "East"
    assert searched.json()["submissions"] == []
    assert len(everything.json()["submissions"]) == 3
    assert everything.json()["scope"] == "All Regions"


def test_public_intake_creates_new_submission(client: TestClient, db_session: Session) -> None:
    response = client.post(
        "/api/submissions",
        json={
            "submission_type": "Victim Report",
            "full_name": "Dipa Sharma",
            "email": "dipa@mail.test",
            "region": "North",
            "details": "Harassment near campus",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "New"
    stored = db_session.scalar(select(Submission).where(Submission.id == uuid.UUID(body["id"])))
    assert stored is not None
    assert stored.region == "North"


def test_anonymous_submission_page_redirects_to_sign_in(client: TestClient) -> None:
    response = client.get("/admin/submissions", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_status_update_survives_failed_audit_append(
    client: TestClient,
    db_session: Session,
    submissions: dict[str, Submission],
    add_profile: Callable[..., Profile],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    head = add_profile(Role.REGIONAL_HEAD, "East")
    report = submissions["east_report"]
    commit = db_session.commit

    def commit_without_audit() -> None:
        if any(isinstance(pending, AuditLog) for pending in db_session.new):
            raise OperationalError("INSERT INTO audit_logs", {}, Exception("database is locked"))
        commit()

    monkeypatch.setattr(db_session, "commit", commit_without_audit)

    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(report.id), "status": "Resolved"},
        headers=auth_headers(head.id),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Resolved"
    monkeypatch.undo()
    db_session.refresh(report)
    assert report.status == SubmissionStatus.RESOLVED
    assert _audit_entries(db_session) == []
