import os
from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL")

engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

ACTIVE_SLOT_INDEX_NAME = 'uq_appointment_active_slot'

_schema_lock = Lock()
_schedule_schema_checked = False
_appointment_schema_checked = False


def ensure_schedule_schema() -> None:
    global _schedule_schema_checked

    if _schedule_schema_checked:
        return

    with _schema_lock:
        if _schedule_schema_checked:
            return

        inspector = inspect(engine)

        if 'doctor_schedule' not in inspector.get_table_names():
            _schedule_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('doctor_schedule')}

        with engine.begin() as connection:
            if 'is_available' not in existing_columns:
                connection.execute(
                    text('ALTER TABLE doctor_schedule ADD COLUMN is_available BOOLEAN DEFAULT TRUE')
                )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_doctor_schedule_doctor_date ON doctor_schedule(doctor_id, work_date)')
            )

        _schedule_schema_checked = True


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointment' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('appointment')}
        migration_steps = [
            ('symptom', 'ALTER TABLE appointment ADD COLUMN symptom VARCHAR'),
            ('note', 'ALTER TABLE appointment ADD COLUMN note VARCHAR'),
            ('end_time', 'ALTER TABLE appointment ADD COLUMN end_time TIME'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text(
                    f'CREATE UNIQUE INDEX IF NOT EXISTS {ACTIVE_SLOT_INDEX_NAME} '
                    "ON appointment(doctor_id, appointment_date, start_time) WHERE status <> 'cancelled'"
                )
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointment_patient_date ON appointment(patient_id, appointment_date)')
            )

        _appointment_schema_checked = True


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
