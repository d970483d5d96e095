"""
Tests for teacher auth, subjects and the app shell

Test Coverage:
- Login/profile with real JWTs
- Protected routes reject missing or foreign tokens
- Default admin seeding
- Subject creation and lookup
- Root and health endpoints
"""
from datetime import timedelta

from jose import jwt

from quizgen import api, config
from quizgen.auth.security import ALGORITHM, TokenClaims, hash_password, issue_token, read_token, verify_password
from quizgen.database.models import Teacher


class TestSecurity:
    def test_password_when_hashed_then_verifies(self):
        hashed = hash_password("s3cret")

        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_token_when_issued_then_claims_round_trip(self):
        claims = read_token(issue_token(5, email="t@school.test"))

        assert claims == TokenClaims(teacher_id=5, role="teacher", email="t@school.test")
        assert claims.is_teacher

    def test_token_when_garbage_then_none(self):
        assert read_token("not.a.token") is None

    def test_token_when_expired_then_none(self):
        assert read_token(issue_token(5, ttl=timedelta(seconds=-1))) is None

    def test_token_when_subject_missing_then_none(self):
        token = jwt.encode({"role": "teacher"}, config.JWT_SECRET_KEY, algorithm=ALGORITHM)

        assert read_token(token) is None


class TestTeacherLogin:
    def test_login_when_credentials_valid_then_token_works_for_me(self, anon_client, teacher):
        res = anon_client.post("/auth/teacher/login", json={"email": teacher.email, "password": "secret"})

        assert res.status_code == 200
        token = res.json()["access_token"]
        me = anon_client.get("/auth/teacher/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == teacher.email

    def test_login_when_password_wrong_then_401(self, anon_client, teacher):
        res = anon_client.post("/auth/teacher/login", json={"email": teacher.email, "password": "nope"})

        assert res.status_code == 401

    def test_protected_route_when_no_token_then_rejected(self, anon_client):
        assert anon_client.get("/questions/").status_code in (401, 403)

    def test_protected_route_when_role_not_teacher_then_403(self, anon_client, teacher):
        token = issue_token(teacher.id, role="student")

        res = anon_client.get("/exams/", headers={"Authorization": f"Bearer {token}"})

        assert res.status_code == 403


class TestSeeding:
    def test_seed_when_no_teachers_then_admin_created_once(self, monkeypatch, session_factory, db):
        monkeypatch.setattr(api, "SessionLocal", session_factory)

        api._seed_defaults()
        api._seed_defaults()

        admins = db.query(Teacher).filter(Teacher.is_admin.is_(True)).all()
        assert len(admins) == 1


class TestSubjects:
    def test_subject_when_created_then_listed(self, client):
        res = client.post("/subjects/", json={"name": "Physics", "description": "Forces"})

        assert res.status_code == 201
        assert [s["name"] for s in client.get("/subjects/").json()] == ["Physics"]

    def test_subject_when_duplicate_then_400(self, client, subject):
        assert client.post("/subjects/", json={"name": subject.name}).status_code == 400

    def test_subject_when_unknown_then_404(self, client):
        assert client.get("/subjects/999").status_code == 404


def test_root_and_health(anon_client):
    assert anon_client.get("/").json()["name"] == "QuizGen API"
    health = anon_client.get("/health").json()
    assert health["status"] == "healthy"
