import os
import sys
import tempfile
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient
from todo_api.config import Settings
from todo_api.main import create_app

db_path = os.path.join(tempfile.mkdtemp(), "quick_post.db")
settings = Settings(secret_key=os.environ.get("JWT_SECRET", "quick-post-secret"), database_url=f"sqlite:///{db_path}")
client = TestClient(create_app(settings))

email = "quick_test_user@example.com"
password = "correct_horse_battery_staple"
r = client.post("/register", json={"username": "quick_test_user", "email": email, "password": password})
print('register', r.status_code, r.json())

r = client.post("/login", json={"email": email, "password": password})
print('login', r.status_code)
token = r.json().get("token")

r = client.post("/todos", json={"item": "try the api"}, headers={"Authorization": f"Bearer {token}"})
print('create todo', r.status_code)
try:
    print('json:', r.json())
except ValueError:
    print('text:', r.text)
