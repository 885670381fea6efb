from datetime import datetime, timedelta

from studyplan.main import app
from studyplan.models.entities import Flashcard, Goal, TimeSlot
from studyplan.routers.deps import get_time_slot_repo
from studyplan.services.repository import InMemoryTimeSlotRepository
from studyplan.utils.seed import bootstrap_demo_data, ensure_demo_user

ROUTINE = {
    "date": "2024-05-01",
    "wakeUpTime": "07:00",
    "sleepTime": "23:00",
    "studyHoursGoal": 4,
    "maxSessionLength": 60,
    "breakLength": 15,
    "timeBlocks": [],
}


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


# ---------------------------------------------------------------------------
# time slots
# ---------------------------------------------------------------------------

def test_time_slot_crud(client):
    resp = client.post(
        "/api/time-slots",
        json={"subject": "Math", "startTime": "2024-05-01T10:00:00", "duration": 60, "color": "red"},
    )
    assert resp.status_code == 201
    slot = resp.json()
    assert slot["subject"] == "Math"
    assert slot["userId"] >= 1
    assert slot["notes"] is None

    resp = client.put(f"/api/time-slots/{slot['id']}", json={"duration": 90, "notes": "chapter 4"})
    assert resp.status_code == 200
    assert resp.json()["duration"] == 90
    assert resp.json()["subject"] == "Math"

    assert client.get(f"/api/time-slots/{slot['id']}").json()["notes"] == "chapter 4"

    assert client.delete(f"/api/time-slots/{slot['id']}").status_code == 204
    resp = client.get(f"/api/time-slots/{slot['id']}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Time slot not found"


def test_time_slots_filtered_by_date(client):
    for start in ("2024-05-01T00:00:00", "2024-05-01T23:59:00", "2024-05-02T08:00:00"):
        client.post(
            "/api/time-slots",
            json={"subject": "Reading", "startTime": start, "duration": 30, "color": "green"},
        )

    assert len(client.get("/api/time-slots").json()) == 3
    assert len(client.get("/api/time-slots", params={"date": "2024-05-01"}).json()) == 2
    assert len(client.get("/api/time-slots", params={"date": "2024-05-03"}).json()) == 0


def test_invalid_time_slot_is_400(client):
    resp = client.post("/api/time-slots", json={"startTime": "2024-05-01T10:00:00", "duration": 60})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid request data"
    assert body["errors"]


def test_missing_records_are_404(client):
    assert client.put("/api/time-slots/999", json={"duration": 5}).status_code == 404
    assert client.delete("/api/time-slots/999").status_code == 404
    assert client.get("/api/flashcards/999").status_code == 404
    assert client.get("/api/goals/999").status_code == 404
    assert client.post("/api/goals/999/toggle").status_code == 404


# ---------------------------------------------------------------------------
# schedule generation
# ---------------------------------------------------------------------------

def test_generate_schedule(client):
    resp = client.post("/api/generate-schedule", json=ROUTINE)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Generated 1 study sessions totaling 240 minutes"
    [session] = body["studySessions"]
    assert session["subject"] == "Study Session"
    assert session["startTime"] == "2024-05-01T07:00:00"
    assert session["duration"] == 240
    assert session["id"] >= 1

    day = client.get("/api/time-slots", params={"date": "2024-05-01"}).json()
    assert sorted(s["subject"] for s in day) == ["Sleep", "Sleep", "Study Session"]


def test_generate_schedule_with_activities(client):
    payload = dict(ROUTINE, timeBlocks=[
        {"activity": "Class", "startTime": "9:00 AM", "endTime": "1:00 PM"},
        {"activity": "Broken"},
    ])
    body = client.post("/api/generate-schedule", json=payload).json()

    # 13:00-23:00 is the longest gap
    assert body["studySessions"][0]["startTime"] == "2024-05-01T13:00:00"
    subjects = [s["subject"] for s in client.get("/api/time-slots").json()]
    assert subjects.count("Class") == 1
    assert "Broken" not in subjects


def test_generate_schedule_is_not_idempotent(client):
    client.post("/api/generate-schedule", json=ROUTINE)
    client.post("/api/generate-schedule", json=ROUTINE)

    assert len(client.get("/api/time-slots").json()) == 6


class _BrokenRepo(InMemoryTimeSlotRepository):
    def __init__(self, fail_after):
        super().__init__()
        self.fail_after = fail_after

    def create(self, slot):
        if len(self) >= self.fail_after:
            raise RuntimeError("disk full")
        return super().create(slot)


def test_generate_schedule_failure_keeps_partial_records(client):
    broken = _BrokenRepo(fail_after=2)
    app.dependency_overrides[get_time_slot_repo] = lambda: broken

    resp = client.post("/api/generate-schedule", json=ROUTINE)

    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to generate schedule", "error": "disk full"}
    assert len(broken) == 2


# ---------------------------------------------------------------------------
# flashcards
# ---------------------------------------------------------------------------

def test_flashcard_lifecycle(client):
    resp = client.post("/api/flashcards", json={"front": "H2O?", "back": "Water", "tag": "Chemistry"})
    assert resp.status_code == 201
    card = resp.json()
    assert card["difficulty"] == 0
    assert card["lastReviewed"] is None
    next_review = datetime.fromisoformat(card["nextReview"])
    assert timedelta(hours=23) < next_review - datetime.now() <= timedelta(days=1)

    client.post("/api/flashcards", json={"front": "F=?", "back": "ma", "tag": "Physics"})
    assert len(client.get("/api/flashcards").json()) == 2
    assert [c["front"] for c in client.get("/api/flashcards", params={"tag": "Physics"}).json()] == ["F=?"]

    resp = client.put(f"/api/flashcards/{card['id']}", json={"difficulty": 2})
    assert resp.json()["difficulty"] == 2
    assert client.put(f"/api/flashcards/{card['id']}", json={"difficulty": 7}).status_code == 400

    assert client.delete(f"/api/flashcards/{card['id']}").status_code == 204
    assert len(client.get("/api/flashcards").json()) == 1


def test_due_flashcards(client, db_session):
    user = ensure_demo_user(db_session)
    now = datetime.now()
    db_session.add_all([
        Flashcard(user_id=user.id, front="old", back="x", next_review=now - timedelta(days=2), difficulty=1),
        Flashcard(user_id=user.id, front="later", back="x", next_review=now + timedelta(days=3), difficulty=0),
        Flashcard(user_id=user.id, front="never", back="x", next_review=None, difficulty=0),
    ])
    db_session.commit()

    due = client.get("/api/flashcards/due").json()
    assert [c["front"] for c in due] == ["old"]


# ---------------------------------------------------------------------------
# goals
# ---------------------------------------------------------------------------

def test_goal_lifecycle(client):
    resp = client.post("/api/goals", json={"text": "Finish problem set", "dueDate": "2024-05-03T00:00:00"})
    assert resp.status_code == 201
    goal = resp.json()
    assert goal["completed"] is False

    assert client.post(f"/api/goals/{goal['id']}/toggle").json()["completed"] is True
    assert client.post(f"/api/goals/{goal['id']}/toggle").json()["completed"] is False

    resp = client.put(f"/api/goals/{goal['id']}", json={"text": "Finish both problem sets"})
    assert resp.json()["text"] == "Finish both problem sets"

    assert client.delete(f"/api/goals/{goal['id']}").status_code == 204
    assert client.get("/api/goals").json() == []


# ---------------------------------------------------------------------------
# analytics
# ---------------------------------------------------------------------------

def test_analytics_summary(client, db_session):
    bootstrap_demo_data(db_session)
    today = datetime.now().replace(hour=10, minute=0, second=0, microsecond=0)
    client.post(
        "/api/time-slots",
        json={"subject": "Math", "startTime": today.isoformat(), "duration": 90, "color": "red"},
    )
    client.post(
        "/api/time-slots",
        json={"subject": "Math", "startTime": (today - timedelta(days=30)).isoformat(), "duration": 30, "color": "red"},
    )

    body = client.get("/api/analytics/summary").json()

    assert body["totalHours"] == 2.0
    assert body["uniqueSubjects"] == 1
    assert body["minutesBySubject"] == {"Math": 120}
    assert len(body["last7Days"]) == 7
    assert body["last7Days"][-1] == {"day": today.date().isoformat(), "minutes": 90}
    assert body["goalsCompleted"] == 1
    assert body["goalsActive"] == 2
    assert body["goalCompletionPercent"] == 33
    assert body["flashcardsByDifficulty"] == {"easy": 3, "medium": 0, "hard": 0}
    assert body["flashcardMasteryPercent"] == 100


# ---------------------------------------------------------------------------
# partial updates and ownership
# ---------------------------------------------------------------------------

def _make_slot(client):
    return client.post(
        "/api/time-slots",
        json={"subject": "Math", "startTime": "2024-05-01T10:00:00", "duration": 60, "color": "red", "notes": "ch 1"},
    ).json()


def test_null_for_required_fields_is_400(client):
    slot = _make_slot(client)
    goal = client.post("/api/goals", json={"text": "Read"}).json()
    card = client.post("/api/flashcards", json={"front": "Q", "back": "A"}).json()

    for url, body in [
        (f"/api/time-slots/{slot['id']}", {"subject": None}),
        (f"/api/time-slots/{slot['id']}", {"startTime": None}),
        (f"/api/goals/{goal['id']}", {"text": None}),
        (f"/api/goals/{goal['id']}", {"completed": None}),
        (f"/api/flashcards/{card['id']}", {"front": None}),
    ]:
        resp = client.put(url, json=body)
        assert resp.status_code == 400, url
        assert resp.json()["message"] == "Invalid request data"

    assert client.get(f"/api/time-slots/{slot['id']}").json()["subject"] == "Math"
    assert client.get(f"/api/goals/{goal['id']}").json()["text"] == "Read"


def test_null_clears_optional_fields(client):
    slot = _make_slot(client)
    resp = client.put(f"/api/time-slots/{slot['id']}", json={"notes": None})

    assert resp.status_code == 200
    assert resp.json()["notes"] is None


def test_other_users_records_are_hidden(client, db_session):
    owner = ensure_demo_user(db_session)
    other = owner.id + 100
    slot = TimeSlot(user_id=other, subject="Private", start_time=datetime(2024, 5, 1, 9), duration=30, color="red")
    card = Flashcard(user_id=other, front="q", back="a", difficulty=0)
    goal = Goal(user_id=other, text="secret", completed=False)
    db_session.add_all([slot, card, goal])
    db_session.commit()

    assert client.get(f"/api/time-slots/{slot.id}").status_code == 404
    assert client.put(f"/api/time-slots/{slot.id}", json={"duration": 5}).status_code == 404
    assert client.delete(f"/api/time-slots/{slot.id}").status_code == 404
    assert client.get(f"/api/flashcards/{card.id}").status_code == 404
    assert client.delete(f"/api/flashcards/{card.id}").status_code == 404
    assert client.post(f"/api/goals/{goal.id}/toggle").status_code == 404
    assert client.delete(f"/api/goals/{goal.id}").status_code == 404

    db_session.refresh(slot)
    assert slot.duration == 30


def test_generate_schedule_absorbs_huge_clock_values(client):
    resp = client.post("/api/generate-schedule", json=dict(ROUTINE, sleepTime="1e300:00"))

    assert resp.status_code == 201
    assert resp.json()["message"] == "Generated 1 study sessions totaling 240 minutes"
