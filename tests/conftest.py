from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from labsyncpro import models  # noqa: F401
from labsyncpro.client import LabSyncClient
from labsyncpro.db import get_session
from labsyncpro.main import app
from labsyncpro.models import Computer, Group, GroupMember, Lab, SchoolClass, Seat, User
from labsyncpro.security import create_access_token

DATABASE_URL = "sqlite://"
engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)


@pytest.fixture(name="session")
def session_fixture():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    yield client
    app.dependency_overrides.clear()


def _user(session, email, first, last, role="student", code=None):
    user = User(email=email, first_name=first, last_name=last, role=role, student_code=code)
    user.set_password("password")
    session.add(user)
    return user


@pytest.fixture(name="data")
def data_fixture(session: Session):
    admin = _user(session, "admin@example.com", "Ada", "Admin", role="admin")
    instructor = _user(session, "instructor@example.com", "Ian", "Instructor", role="instructor")
    s1 = _user(session, "s1@example.com", "Kai", "Nguyen", code="ST000001")
    s2 = _user(session, "s2@example.com", "Mia", "Singh", code="ST000002")
    s3 = _user(session, "s3@example.com", "Noah", "Smith", code="ST000003")
    session.commit()

    lab = Lab(name="Computer Lab 2", location="Block A")
    other_lab = Lab(name="Computer Lab 1", location="Block B")
    session.add_all([lab, other_lab])
    session.flush()
    computers = [
        Computer(lab_id=lab.id, computer_name=f"CL2-PC-{n:03d}", computer_number=n, is_functional=n != 19)
        for n in range(1, 20)
    ]
    seats = [Seat(lab_id=lab.id, seat_number=n, is_available=n != 20) for n in range(1, 21)]
    other_seat = Seat(lab_id=other_lab.id, seat_number=1)
    other_computer = Computer(lab_id=other_lab.id, computer_name="CL1-PC-001", computer_number=1)
    session.add_all(computers + seats + [other_seat, other_computer])
    session.commit()

    school_class = SchoolClass(name="11 NM C", grade=11, stream="NM", section="C", lab_id=lab.id)
    school_class.students.extend([s1, s2, s3])
    session.add(school_class)
    session.commit()

    group_a = Group(class_id=school_class.id, name="Group A", leader_id=s1.id)
    group_b = Group(class_id=school_class.id, name="Group B", leader_id=s3.id)
    session.add_all([group_a, group_b])
    session.flush()
    session.add_all([
        GroupMember(group_id=group_a.id, user_id=s1.id, role="leader"),
        GroupMember(group_id=group_a.id, user_id=s2.id, role="member"),
        GroupMember(group_id=group_b.id, user_id=s3.id, role="leader"),
    ])
    session.commit()

    return SimpleNamespace(
        admin=admin,
        instructor=instructor,
        students=[s1, s2, s3],
        lab=lab,
        other_lab=other_lab,
        computers=computers,
        seats=seats,
        maintenance_seat=seats[-1],
        broken_computer=computers[-1],
        other_seat=other_seat,
        other_computer=other_computer,
        school_class=school_class,
        group_a=group_a,
        group_b=group_b,
    )


def token_for(user: User) -> str:
    return create_access_token({"sub": str(user.id)})


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture(name="staff_headers")
def staff_headers_fixture(data):
    return auth(data.instructor)


@pytest_asyncio.fixture(name="api")
async def api_fixture(client, data):
    api = LabSyncClient(
        base_url="http://test/api",
        token=token_for(data.instructor),
        transport=ASGITransport(app=app),
    )
    yield api
    await api.aclose()
