import os

# Must be set before feeledger is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SERVICE_DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ADMIN_EMAIL"] = "admin@school.test"
os.environ["ADMIN_PASSWORD"] = "admin"

import pytest
from fastapi.testclient import TestClient

from feeledger import fee_check
from feeledger.database import Base, engine, SessionLocal
from feeledger.errors import PersistenceError
from feeledger.main import app
from feeledger.models.students import Student
from feeledger.storage import StoredImage, get_image_store

OWNER = "admin@school.test"


class FakeImageStore:
    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_upload = False
        self.counter = 0

    def store(self, image):
        if self.fail_upload:
            raise PersistenceError()
        self.counter += 1
        public_id = f"students/img{self.counter}"
        self.objects[public_id] = image.data
        return StoredImage(url=f"https://images.test/{public_id}.png", public_id=public_id)

    def delete(self, public_id):
        self.deleted.append(public_id)
        self.objects.pop(public_id, None)


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def image_store():
    store = FakeImageStore()
    app.dependency_overrides[get_image_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_image_store, None)


@pytest.fixture
def client(image_store):
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    r = client.post("/auth/login", json={"email": OWNER, "password": "admin"})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def lookup_client():
    return TestClient(fee_check.app)


@pytest.fixture
def make_student(db):
    def _make(name="Aarav Sharma", mobile="9876543210", fee=700, class_name="class3", owner_id=OWNER):
        student = Student(
            owner_id=owner_id,
            name=name,
            class_name=class_name,
            father_name="Rakesh Sharma",
            mobile=mobile,
            monthly_fee_amount=fee,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _make
