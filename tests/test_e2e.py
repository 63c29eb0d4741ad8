import concurrent.futures
import uuid

from fastapi.testclient import TestClient

from todo_api.config import Settings
from todo_api.main import create_app


class TestE2E:
    def test_complete_user_journey(self, client: TestClient):
        # 1. Registration
        username = f"user_{uuid.uuid4().hex[:8]}"
        email = f"{username}@example.com"
        password = "SecurePass123!"

        r = client.post("/register", json={"username": username, "password": password})
        assert r.status_code == 400

        r = client.post("/register", json={"username": username, "email": email, "password": password})
        assert r.status_code == 201
        user_id = r.json()["user_id"]

        r = client.post("/register", json={"username": username, "email": email, "password": "OtherPass123!"})
        assert r.status_code == 400

        # 2. Login
        r = client.post("/login", json={"email": email, "password": "WrongPass123!"})
        assert r.status_code == 401

        r = client.post("/login", json={"email": email, "password": password})
        assert r.status_code == 200
        assert r.json()["user_id"] == user_id
        headers = {"Authorization": f"Bearer {r.json()['token']}"}

        # 3. Todos
        r = client.post("/todos", json={"item": "Test Task"})
        assert r.status_code == 401

        r = client.post("/todos", json={"item": "first todo"}, headers=headers)
        assert r.status_code == 201
        todo_id = r.json()["id"]

        r = client.get("/todos", headers=headers)
        assert [t["id"] for t in r.json()] == [todo_id]

        r = client.patch(f"/todos/{todo_id}", json={"completed": True}, headers=headers)
        assert r.status_code == 200
        assert r.json()["completed"] is True

        # 4. Isolation
        other = f"other_{uuid.uuid4().hex[:8]}"
        client.post("/register", json={"username": other, "email": f"{other}@example.com", "password": password})
        r = client.post("/login", json={"email": f"{other}@example.com", "password": password})
        other_headers = {"Authorization": f"Bearer {r.json()['token']}"}

        assert client.get("/todos", headers=other_headers).json() == []
        assert client.delete(f"/todos/{todo_id}", headers=other_headers).status_code == 404

        # 5. Cleanup
        assert client.delete(f"/todos/{todo_id}", headers=headers).status_code == 204
        assert client.get("/todos", headers=headers).json() == []

    def test_token_expiration(self, tmp_path):
        settings = Settings(
            secret_key="e2e-secret",
            access_token_expire_minutes=-1,
            database_url=f"sqlite:///{tmp_path / 'expired.db'}",
        )
        client = TestClient(create_app(settings))
        client.post("/register", json={"username": "late", "email": "late@example.com", "password": "Pass123!"})

        r = client.post("/login", json={"email": "late@example.com", "password": "Pass123!"})
        assert r.status_code == 200

        r = client.post("/todos", json={"item": "too late"}, headers={"Authorization": f"Bearer {r.json()['token']}"})
        assert r.status_code == 401
        assert "expired" in r.json()["detail"].lower()

    def test_tokens_from_another_deployment_are_rejected(self, client: TestClient, tmp_path, make_user):
        make_user()
        foreign = TestClient(create_app(Settings(secret_key="another-secret", database_url=f"sqlite:///{tmp_path / 'other.db'}")))
        foreign.post("/register", json={"username": "x", "email": "x@example.com", "password": "Pass123!"})
        token = foreign.post("/login", json={"email": "x@example.com", "password": "Pass123!"}).json()["token"]

        r = client.get("/todos", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401
        assert r.json() == {"detail": "Invalid token"}

    def test_concurrent_operations(self, client: TestClient, make_user):
        user = make_user()

        def create_todo(i):
            return client.post("/todos", json={"item": f"Concurrent Task {i}"}, headers=user["headers"])

        with concurrent.futures.ThreadPoolExecutor(max_workers=3) as executor:
            futures = [executor.submit(create_todo, i) for i in range(5)]
            responses = [f.result() for f in futures]

        assert all(r.status_code == 201 for r in responses)

        todos = client.get("/todos", headers=user["headers"]).json()
        assert len(todos) == 5
        assert len({t["item"] for t in todos}) == 5
        assert all(t["user_id"] == user["id"] for t in todos)
