import pytest
from tutorhunt.database.database import BookedTutor, Tutor
from tutorhunt.repositories import bookings as booking_repository
from tutorhunt.services import booking_workflow

OWNER = "owner@example.com"
STUDENT = "student@example.com"

@pytest.fixture()
def tutor(client, login, tutor_payload):
    login(OWNER)
    response = client.post("/tutors", json=tutor_payload)
    assert response.status_code == 201
    return response.json()["tutor"]

def book(client, tutor, **extra):
    return client.post("/booked-tutors", json={
        "tutorId": tutor["id"],
        "userEmail": STUDENT,
        "tutorEmail": tutor["email"],
        "language": tutor["language"],
        "price": tutor["price"],
        **extra
    })

def review(client, tutor, email=STUDENT):
    return client.patch(f"/tutors/{tutor['id']}/review", params={"email": email})

def booking_count(test_db, tutor_id, email=STUDENT):
    test_db.expire_all()
    return test_db.query(BookedTutor).filter(BookedTutor.tutor_id == tutor_id, BookedTutor.user_email == email).count()

def review_count(test_db, tutor_id):
    test_db.expire_all()
    return test_db.query(Tutor).filter(Tutor.id == tutor_id).first().review

##########################
######## BOOKINGS ########
##########################

def test_book_tutor(client, login, tutor):
    login(STUDENT)
    response = book(client, tutor, hasReviewed=True, date="2026-11-02", notes="Evenings please")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    booking = body["booking"]
    assert booking["tutorId"] == tutor["id"]
    assert booking["userEmail"] == STUDENT
    assert booking["hasReviewed"] is False
    assert booking["date"] == "2026-11-02"
    assert booking["notes"] == "Evenings please"

def test_book_tutor_defaults_to_caller_email(client, login, tutor):
    login(STUDENT)
    response = client.post("/booked-tutors", json={"tutorId": tutor["id"]})
    assert response.status_code == 201
    assert response.json()["booking"]["userEmail"] == STUDENT

def test_duplicate_booking_conflicts(client, login, tutor, test_db):
    login(STUDENT)
    assert book(client, tutor).status_code == 201

    response = book(client, tutor)
    assert response.status_code == 409
    assert response.json()["success"] is False
    assert booking_count(test_db, tutor["id"]) == 1

def test_racing_duplicate_booking_rejected_by_database(client, login, tutor, test_db, monkeypatch):
    login(STUDENT)
    assert book(client, tutor).status_code == 201

    # Both requests pass the existence check before either insert commits
    monkeypatch.setattr(booking_repository, "find_booking", lambda db, tutor_id, user_email: None)

    response = book(client, tutor)
    assert response.status_code == 409
    assert booking_count(test_db, tutor["id"]) == 1

def test_booking_requires_login(client, tutor, test_db):
    client.cookies.clear()
    response = book(client, tutor)
    assert response.status_code == 401
    assert booking_count(test_db, tutor["id"]) == 0

def test_booking_with_out_of_range_tutor_id(client, login, test_db):
    login(STUDENT)
    for tutor_id in [0, 10**20]:
        response = client.post("/booked-tutors", json={"tutorId": tutor_id})
        assert response.status_code == 422
        assert response.json()["success"] is False
    assert test_db.query(BookedTutor).count() == 0

def test_list_booked_tutors(client, login, tutor):
    login(STUDENT)
    book(client, tutor, notes="first")
    client.post("/booked-tutors", json={"tutorId": tutor["id"], "userEmail": "other.student@example.com"})

    response = client.get("/booked-tutors", params={"email": STUDENT})
    assert response.status_code == 200
    bookings = response.json()
    assert len(bookings) == 1
    assert bookings[0]["userEmail"] == STUDENT
    assert bookings[0]["notes"] == "first"

def test_list_booked_tutors_of_someone_else_is_forbidden(client, login, tutor):
    login(STUDENT)
    response = client.get("/booked-tutors", params={"email": "other.student@example.com"})
    assert response.status_code == 403

def test_list_booked_tutors_requires_email(client, login):
    login(STUDENT)
    assert client.get("/booked-tutors").status_code == 400

def test_list_booked_tutors_requires_login(client):
    assert client.get("/booked-tutors", params={"email": STUDENT}).status_code == 401

##########################
######### REVIEWS ########
##########################

def test_review_booked_tutor(client, login, tutor, test_db):
    login(STUDENT)
    book(client, tutor)

    response = review(client, tutor)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Review submitted successfully", "review": 1}
    assert review_count(test_db, tutor["id"]) == 1
    assert booking_repository.find_booking(test_db, tutor["id"], STUDENT).has_reviewed is True

def test_second_review_is_forbidden(client, login, tutor, test_db):
    login(STUDENT)
    book(client, tutor)
    assert review(client, tutor).status_code == 200

    response = review(client, tutor)
    assert response.status_code == 403
    assert review_count(test_db, tutor["id"]) == 1

def test_review_for_someone_else_is_forbidden(client, login, tutor, test_db):
    login(STUDENT)
    book(client, tutor)

    login("other.student@example.com")
    response = review(client, tutor, email=STUDENT)
    assert response.status_code == 403
    assert review_count(test_db, tutor["id"]) == 0
    assert booking_repository.find_booking(test_db, tutor["id"], STUDENT).has_reviewed is False

def test_review_requires_email(client, login, tutor):
    login(STUDENT)
    response = client.patch(f"/tutors/{tutor['id']}/review")
    assert response.status_code == 400

def test_review_missing_tutor(client, login):
    login(STUDENT)
    response = client.patch("/tutors/999/review", params={"email": STUDENT})
    assert response.status_code == 404

def test_review_tutor_with_impossible_id(client, login):
    login(STUDENT)
    for tutor_id in ["abc", str(10**20)]:
        response = client.patch(f"/tutors/{tutor_id}/review", params={"email": STUDENT})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Tutor not found"}

def test_review_without_booking(client, login, tutor, test_db):
    login(STUDENT)
    response = review(client, tutor)
    assert response.status_code == 404
    assert response.json()["message"] == "You have not booked this tutor"
    assert review_count(test_db, tutor["id"]) == 0

def test_review_requires_login(client, login, tutor, test_db):
    login(STUDENT)
    book(client, tutor)
    client.cookies.clear()

    assert review(client, tutor).status_code == 401
    assert review_count(test_db, tutor["id"]) == 0

def test_racing_review_counted_once(client, login, tutor, test_db, monkeypatch):
    login(STUDENT)
    book(client, tutor)
    assert review(client, tutor).status_code == 200

    # A second request that read the booking before the first one committed
    stale = BookedTutor(tutor_id=tutor["id"], user_email=STUDENT, has_reviewed=False)
    monkeypatch.setattr(booking_repository, "find_booking", lambda db, tutor_id, user_email: stale)

    response = review(client, tutor)
    assert response.status_code == 403
    assert review_count(test_db, tutor["id"]) == 1

def test_failed_counter_update_rolls_back_flag(client, login, tutor, test_db, monkeypatch):
    login(STUDENT)
    book(client, tutor)

    from fastapi import HTTPException
    from tutorhunt.repositories import tutors as tutor_repository

    def failing_increment(db, tutor_id, commit=True):
        raise HTTPException(status_code=500, detail="Failed to update tutor review count")

    monkeypatch.setattr(tutor_repository, "increment_review", failing_increment)

    response = review(client, tutor)
    assert response.status_code == 500
    assert booking_repository.find_booking(test_db, tutor["id"], STUDENT).has_reviewed is False

    # Once the store recovers the review can be submitted again
    monkeypatch.undo()
    assert review(client, tutor).status_code == 200
    assert review_count(test_db, tutor["id"]) == 1

def test_submit_review_directly(test_db):
    from tutorhunt.schemas.authentication_schema import DecodedAccessToken
    from tutorhunt.schemas.booking_schema import BookingCreate

    tutor = Tutor(email=OWNER, language="English", price=10)
    test_db.add(tutor)
    test_db.commit()

    identity = DecodedAccessToken(email=STUDENT, exp=0)
    booking_workflow.book_tutor(test_db, identity, BookingCreate(tutor_id=tutor.id))
    reviewed = booking_workflow.submit_review(test_db, tutor.id, identity, STUDENT)

    assert reviewed.review == 1
