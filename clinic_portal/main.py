import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from clinic_portal.core import config
from clinic_portal.database import Base, engine, ensure_appointment_schema, ensure_schedule_schema
from clinic_portal.models import appointment, patient, schedule, specialty  # noqa: F401
from clinic_portal.routes import appointment_routes, schedule_routes, specialty_routes

logging.basicConfig(
    level=logging.DEBUG if config.DEBUG else logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = FastAPI(title='Clinic Portal API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_schedule_schema()
        ensure_appointment_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Clinic Portal API Running'}


app.include_router(specialty_routes.router, prefix='/specialties')
app.include_router(schedule_routes.router, prefix='/schedules')
app.include_router(appointment_routes.router, prefix='/appointments')


def run() -> None:
    uvicorn.run('clinic_portal.main:app', host=config.HOST, port=config.PORT, reload=config.DEBUG)
