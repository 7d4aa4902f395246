from __future__ import annotations

import pytest

from conftest import TEST_EMAIL, TEST_UID
from recovery_companion.services.profile_store import ProfileNotFoundError


def test_healthz_reports_unconfigured_backends(client) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "not_configured", "storage": "not_configured"}


@pytest.mark.parametrize("path", ["/users/me", "/daily/today", "/progress", "/reminders", "/photos"])
def test_user_routes_require_token(client, path) -> None:
    response = client.get(path)

    assert response.status_code == 401


def test_user_routes_reject_garbage_token(client) -> None:
    response = client.get("/users/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401


def test_profile_routes_without_database_are_unavailable(client, auth_headers) -> None:
    response = client.get("/users/me", headers=auth_headers)

    assert response.status_code == 503


def test_login_creates_user_document(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.create_user_document.return_value = {
        "isNewUser": True,
        "userData": {"profileComplete": False},
    }

    response = client.post("/users/login", headers=auth_headers, json={"display_name": "Alice"})

    assert response.status_code == 200
    assert response.json()["isNewUser"] is True
    profile_store_mock.create_user_document.assert_awaited_once_with(TEST_UID, TEST_EMAIL, "Alice", None)


def test_login_without_body(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.create_user_document.return_value = {"isNewUser": False, "userData": {}}

    response = client.post("/users/login", headers=auth_headers)

    assert response.status_code == 200
    profile_store_mock.create_user_document.assert_awaited_once_with(TEST_UID, TEST_EMAIL, None, None)


def test_get_profile_not_found(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.fetch_profile.return_value = None

    response = client.get("/users/me", headers=auth_headers)

    assert response.status_code == 404


def test_get_profile_database_error_is_500(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.fetch_profile.side_effect = RuntimeError("db down")

    response = client.get("/users/me", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"status": "error", "detail": "db down", "error_type": "RuntimeError"}


def test_onboarding_saves_and_completes_profile(client, auth_headers, profile_store_mock) -> None:
    response = client.post("/users/onboarding", headers=auth_headers, json={
        "surgery_type": " Knee Surgery ",
        "surgery_date": "2026-01-20",
        "expected_recovery_weeks": 12,
        "doctor_info": {"name": "Dr. Lee", "phone": "555-0100", "clinic": "Ortho Center"},
    })

    assert response.status_code == 200
    assert response.json()["profileComplete"] is True
    uid, data = profile_store_mock.save_onboarding_data.await_args.args
    assert uid == TEST_UID
    assert data["surgeryType"] == "Knee Surgery"
    assert data["doctorInfo"]["email"] == ""


def test_onboarding_rejects_bad_surgery_date(client, auth_headers, profile_store_mock) -> None:
    response = client.post("/users/onboarding", headers=auth_headers, json={
        "surgery_type": "Knee Surgery",
        "surgery_date": "last tuesday",
        "doctor_info": {"name": "Dr. Lee", "phone": "555", "clinic": "Ortho"},
    })

    assert response.status_code == 400
    profile_store_mock.save_onboarding_data.assert_not_awaited()


def test_update_surgery_missing_profile_is_404(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.update_surgery_info.side_effect = ProfileNotFoundError(TEST_UID)

    response = client.put("/users/me/surgery", headers=auth_headers, json={
        "surgery_type": "Hip Replacement",
        "surgery_date": "01/15/2026",
        "expected_recovery_weeks": 8,
    })

    assert response.status_code == 404


def test_update_doctor(client, auth_headers, profile_store_mock) -> None:
    response = client.put("/users/me/doctor", headers=auth_headers, json={
        "name": "Dr. Kim", "clinic": "City Clinic", "phone": "555-0101",
    })

    assert response.status_code == 200
    profile_store_mock.update_doctor_info.assert_awaited_once_with(TEST_UID, "Dr. Kim", "City Clinic", "555-0101")


def test_resolve_navigation_anonymous_goes_to_login(client) -> None:
    response = client.get("/navigation/resolve", params={"segment": ""})

    assert response.status_code == 200
    body = response.json()
    assert body["redirect"] is True
    assert body["destination"] == "/login"
    assert body["reason"] == "no_session"


def test_resolve_navigation_invalid_token_is_anonymous(client) -> None:
    response = client.get(
        "/navigation/resolve",
        params={"segment": "login"},
        headers={"Authorization": "Bearer garbage"},
    )

    assert response.json()["redirect"] is False


def test_resolve_navigation_without_database_waits(client, auth_headers) -> None:
    response = client.get("/navigation/resolve", params={"segment": ""}, headers=auth_headers)

    body = response.json()
    assert body["redirect"] is False
    assert body["reason"] == "awaiting_profile"
    assert body["profileComplete"] is None


def test_resolve_navigation_incomplete_profile(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.fetch_profile.return_value = {"profileComplete": False}

    body = client.get("/navigation/resolve", params={"segment": "/"}, headers=auth_headers).json()

    assert body["destination"] == "/onboarding"
    assert body["profileComplete"] is False
    profile_store_mock.fetch_profile.assert_awaited_once_with(TEST_UID)


def test_resolve_navigation_profile_without_flag_stays(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.fetch_profile.return_value = {"surgeryType": "Knee Surgery"}

    body = client.get("/navigation/resolve", params={"segment": "/"}, headers=auth_headers).json()

    assert body["redirect"] is False
    assert body["reason"] == "default"
    assert body["profileComplete"] is None


def test_resolve_navigation_complete_profile_leaves_login(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.fetch_profile.return_value = {"profileComplete": True}

    body = client.get("/navigation/resolve", params={"segment": "login"}, headers=auth_headers).json()

    assert body["destination"] == "/"
    assert body["reason"] == "profile_complete"


def test_resolve_navigation_fetch_failure_waits(client, auth_headers, profile_store_mock) -> None:
    profile_store_mock.fetch_profile.side_effect = ConnectionError("unreachable")

    response = client.get("/navigation/resolve", params={"segment": "daily-tracking"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["reason"] == "awaiting_profile"


def test_send_daily_entry(client, auth_headers, tracking_mock) -> None:
    tracking_mock.save_daily_entry.return_value = "entry-1"

    response = client.post("/daily", headers=auth_headers, json={
        "pain_level": 4,
        "medications": "Ibuprofen",
        "exercises_completed": ["exercise1"],
        "sleep_quality": 3,
        "mood": "happy",
        "photos": [{"url": "https://example/p.jpg", "filename": "p.jpg"}],
    })

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "id": "entry-1"}
    uid, entry = tracking_mock.save_daily_entry.await_args.args
    assert uid == TEST_UID
    assert entry["painLevel"] == 4
    assert entry["photos"] == [{"url": "https://example/p.jpg", "filename": "p.jpg"}]


@pytest.mark.parametrize("field, value", [("pain_level", 11), ("sleep_quality", 0), ("mood", "elated")])
def test_send_daily_entry_validates_ranges(client, auth_headers, tracking_mock, field, value) -> None:
    payload = {"pain_level": 5, "sleep_quality": 3, "mood": "neutral"}
    payload[field] = value

    response = client.post("/daily", headers=auth_headers, json=payload)

    assert response.status_code == 422
    tracking_mock.save_daily_entry.assert_not_awaited()


def test_recent_entries_default_limit(client, auth_headers, tracking_mock) -> None:
    tracking_mock.get_recent_entries.return_value = []

    response = client.get("/daily/recent", headers=auth_headers)

    assert response.status_code == 200
    tracking_mock.get_recent_entries.assert_awaited_once_with(TEST_UID, 7)


def test_recent_entries_rejects_bad_limit(client, auth_headers, tracking_mock) -> None:
    response = client.get("/daily/recent", params={"limit": 0}, headers=auth_headers)

    assert response.status_code == 400


def test_progress_summary(client, auth_headers, profile_store_mock, tracking_mock) -> None:
    profile_store_mock.fetch_profile.return_value = {"surgeryDate": None, "expectedRecoveryWeeks": 12}
    tracking_mock.get_recent_entries.return_value = [
        {"date": "2026-03-14", "painLevel": 4, "exercisesCompleted": ["exercise1", "exercise2"], "medications": ""},
    ]

    response = client.get("/progress", headers=auth_headers)

    summary = response.json()["summary"]
    assert summary["averagePain"] == 4.0
    assert summary["exerciseCompletion"] == 50
    assert summary["painSeries"] == [{"label": "3/14", "value": 4}]


def test_photos_without_storage_are_unavailable(client, auth_headers) -> None:
    response = client.get("/photos", headers=auth_headers)

    assert response.status_code == 503


def test_upload_photo(client, auth_headers, photo_bucket) -> None:
    response = client.post(
        "/photos",
        headers=auth_headers,
        files={"photo": ("knee.jpg", b"jpeg-bytes", "image/jpeg")},
        data={"entry_date": "2026-03-14"},
    )

    assert response.status_code == 200
    photo = response.json()["photo"]
    assert photo["path"].startswith(f"users/{TEST_UID}/photos/2026-03-14_")


@pytest.mark.parametrize("entry_date", ["../../../someone-else/photos/x", "2026-13-01", "yesterday"])
def test_upload_photo_rejects_malformed_entry_date(client, auth_headers, photo_bucket, entry_date) -> None:
    response = client.post(
        "/photos",
        headers=auth_headers,
        files={"photo": ("knee.jpg", b"jpeg-bytes", "image/jpeg")},
        data={"entry_date": entry_date},
    )

    assert response.status_code == 400
    photo_bucket.blob.assert_not_called()


def test_uploaded_photo_path_can_be_deleted(client, auth_headers, photo_bucket) -> None:
    uploaded = client.post(
        "/photos",
        headers=auth_headers,
        files={"photo": ("knee.jpg", b"jpeg-bytes", "image/jpeg")},
        data={"entry_date": " 2026-03-14 "},
    ).json()["photo"]

    response = client.delete("/photos", params={"path": uploaded["path"]}, headers=auth_headers)

    assert response.status_code == 200
    photo_bucket.blob.assert_called_with(uploaded["path"])


def test_delete_someone_elses_photo_is_forbidden(client, auth_headers, photo_bucket) -> None:
    response = client.delete("/photos", params={"path": "users/other/photos/x.jpg"}, headers=auth_headers)

    assert response.status_code == 403
    photo_bucket.blob.assert_not_called()


def test_schedule_daily_reminder_defaults_to_8pm(client, auth_headers, reminders_mock) -> None:
    reminders_mock.schedule_daily_reminder.return_value = "rem-1"

    response = client.post("/reminders/daily", headers=auth_headers)

    assert response.json() == {"status": "ok", "id": "rem-1"}
    reminders_mock.schedule_daily_reminder.assert_awaited_once_with(TEST_UID, 20, 0)


def test_schedule_reminder_validates_time(client, auth_headers, reminders_mock) -> None:
    response = client.post("/reminders/exercise", headers=auth_headers, json={"hour": 24, "minute": 0})

    assert response.status_code == 422


def test_cancel_unknown_reminder_is_404(client, auth_headers, reminders_mock) -> None:
    reminders_mock.cancel_reminder.return_value = 0

    response = client.delete("/reminders/6f1f0c1e-8d7e-4c55-9a39-0a1b2c3d4e5f", headers=auth_headers)

    assert response.status_code == 404


def test_cancel_daily_reminder(client, auth_headers, reminders_mock) -> None:
    reminders_mock.cancel_daily_reminder.return_value = 1

    response = client.delete("/reminders/daily", headers=auth_headers)

    assert response.json() == {"status": "ok", "cancelled": 1}
