from datetime import date

from sqlmodel import Session, SQLModel

from labsyncpro.db import create_db_and_tables, engine
from labsyncpro.models import (
    Computer,
    Group,
    GroupMember,
    Lab,
    SchoolClass,
    Seat,
    User,
)


def add_lab(session, name, location, computers, seats, broken=(), maintenance=()):
    lab = Lab(name=name, location=location)
    session.add(lab); session.flush()
    prefix = name.replace("Computer Lab ", "CL")
    for n in range(1, computers + 1):
        session.add(Computer(
            lab_id=lab.id,
            computer_name=f"{prefix}-PC-{n:03d}",
            computer_number=n,
            is_functional=n not in broken,
            specifications={"cpu": "Intel i5", "ram": "16GB", "storage": "512GB SSD"},
        ))
    for n in range(1, seats + 1):
        session.add(Seat(lab_id=lab.id, seat_number=n, is_available=n not in maintenance))
    return lab


def student(code, email, first, last):
    s = User(student_code=code, email=email, first_name=first, last_name=last, role="student")
    s.set_password("Student123!")
    return s


SQLModel.metadata.drop_all(engine)
create_db_and_tables()

with Session(engine) as session:
    # Staff
    admin = User(email="admin@labsync.local", first_name="Ada", last_name="Admin", role="admin")
    admin.set_password("Admin123!")
    instructor = User(email="instructor@labsync.local", first_name="Ian", last_name="Instructor", role="instructor")
    instructor.set_password("Instructor123!")

    # Students
    s1 = student("ST000001", "s1@labsync.local", "Kai", "Nguyen")
    s2 = student("ST000002", "s2@labsync.local", "Mia", "Singh")
    s3 = student("ST000003", "s3@labsync.local", "Noah", "Smith")
    s4 = student("ST000004", "s4@labsync.local", "Zara", "Patel")
    session.add_all([admin, instructor, s1, s2, s3, s4])
    session.commit()

    # Labs
    add_lab(session, "Computer Lab 1", "Block A, Ground Floor", computers=15, seats=50)
    lab2 = add_lab(session, "Computer Lab 2", "Block A, First Floor", computers=19, seats=50,
                   broken=(19,), maintenance=(50,))
    session.commit()

    # Class and groups
    c = SchoolClass(name="11 NM C", grade=11, stream="NM", section="C",
                    description="Grade 11 Non-Medical section C", lab_id=lab2.id)
    c.students.extend([s1, s2, s3, s4])
    session.add(c); session.commit()

    group_a = Group(class_id=c.id, name="Group A", max_members=4, leader_id=s1.id)
    group_b = Group(class_id=c.id, name="Group B", max_members=4, leader_id=s3.id)
    session.add_all([group_a, group_b]); session.flush()
    session.add_all([
        GroupMember(group_id=group_a.id, user_id=s1.id, role="leader"),
        GroupMember(group_id=group_a.id, user_id=s2.id),
        GroupMember(group_id=group_b.id, user_id=s3.id, role="leader"),
        GroupMember(group_id=group_b.id, user_id=s4.id),
    ])
    session.commit()

    print(f"Database seeded on {date.today():%Y-%m-%d}. Instructor login: instructor@labsync.local / Instructor123!")
