import os
from datetime import date, time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from clinic_portal.database import Base  # noqa: E402
from clinic_portal.models.appointment import Appointment  # noqa: E402
from clinic_portal.models.patient import Patient  # noqa: E402
from clinic_portal.models.schedule import DoctorSchedule  # noqa: E402
from clinic_portal.models.specialty import Doctor, Specialty  # noqa: E402

WORK_DATE = date(2026, 11, 2)


def seed_clinic(db) -> dict:
    cardiology = Specialty(specialty_id=1, specialty_name='Cardiology')
    pediatrics = Specialty(specialty_id=2, specialty_name='Pediatrics')
    db.add_all([cardiology, pediatrics])
    db.add_all([
        Doctor(doctor_id=10, full_name='Dr. Alice Morgan', specialty_id=1),
        Doctor(doctor_id=11, full_name='Dr. Carol Singh', specialty_id=2),
        Doctor(doctor_id=12, full_name='Dr. Unlisted', specialty_id=99),
    ])
    db.add_all([
        Patient(patient_id=100, email='patient@example.com', full_name='Nguyen Van A', gender='male'),
        Patient(patient_id=101, email='other@example.com', full_name='Tran Thi B', gender='female'),
    ])
    window = DoctorSchedule(
        schedule_id=1000,
        doctor_id=10,
        work_date=WORK_DATE,
        start_time=time(8, 0),
        end_time=time(17, 0),
        is_available=True,
    )
    db.add_all([
        window,
        DoctorSchedule(
            schedule_id=1001,
            doctor_id=10,
            work_date=date(2026, 11, 3),
            start_time=time(8, 0),
            end_time=time(9, 0),
            is_available=False,
        ),
        DoctorSchedule(
            schedule_id=1002,
            doctor_id=11,
            work_date=WORK_DATE,
            start_time=time(13, 0),
            end_time=time(15, 0),
            is_available=True,
        ),
    ])
    db.commit()
    return {'window': window, 'doctor_id': 10, 'patient_id': 100, 'other_patient_id': 101}


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clinic_db(session_factory):
    db = session_factory()
    try:
        seed_clinic(db)
        yield db
    finally:
        db.close()


@pytest.fixture
def add_appointment(clinic_db):
    def _add(**overrides) -> Appointment:
        values = {
            'doctor_id': 10,
            'patient_id': 100,
            'schedule_id': 1000,
            'appointment_date': WORK_DATE,
            'start_time': time(8, 0),
            'end_time': time(8, 30),
            'status': 'upcoming',
        }
        values.update(overrides)
        appointment = Appointment(**values)
        clinic_db.add(appointment)
        clinic_db.commit()
        clinic_db.refresh(appointment)
        return appointment

    return _add


@pytest.fixture
def seed():
    return seed_clinic
