from datetime import date, time

from clinic_portal.services.appointments import list_patient_appointments, normalize_sort_order


def _keys(views) -> list[tuple[date, time]]:
    return [(view.appointment_date, view.start_time) for view in views]


def _seed_history(add_appointment) -> None:
    add_appointment(appointment_date=date(2026, 10, 1), start_time=time(14, 0), end_time=time(14, 30), status='completed')
    add_appointment(appointment_date=date(2026, 10, 1), start_time=time(8, 30), end_time=time(9, 0), status='completed')
    add_appointment(appointment_date=date(2026, 9, 15), start_time=time(10, 0), end_time=time(10, 30), status='completed')
    add_appointment(appointment_date=date(2026, 11, 2), start_time=time(9, 0), end_time=time(9, 30), status='upcoming')
    add_appointment(appointment_date=date(2026, 10, 20), start_time=time(9, 0), end_time=time(9, 30), status='cancelled')
    add_appointment(
        patient_id=101,
        appointment_date=date(2026, 10, 5),
        start_time=time(9, 0),
        end_time=time(9, 30),
        status='completed',
    )


def test_list_completed_ascending_by_date_then_time(clinic_db, add_appointment) -> None:
    _seed_history(add_appointment)

    views = list_patient_appointments(100, clinic_db, status_filter='completed', sort_order='asc')

    assert _keys(views) == [
        (date(2026, 9, 15), time(10, 0)),
        (date(2026, 10, 1), time(8, 30)),
        (date(2026, 10, 1), time(14, 0)),
    ]
    assert {view.status for view in views} == {'completed'}


def test_list_without_filter_is_descending_and_scoped_to_patient(clinic_db, add_appointment) -> None:
    _seed_history(add_appointment)

    views = list_patient_appointments(100, clinic_db)

    assert _keys(views) == [
        (date(2026, 11, 2), time(9, 0)),
        (date(2026, 10, 20), time(9, 0)),
        (date(2026, 10, 1), time(14, 0)),
        (date(2026, 10, 1), time(8, 30)),
        (date(2026, 9, 15), time(10, 0)),
    ]
    assert date(2026, 10, 5) not in {view.appointment_date for view in views}


def test_list_enriches_doctor_and_specialty(clinic_db, add_appointment) -> None:
    add_appointment(note='Symptoms: cough')

    [view] = list_patient_appointments(100, clinic_db)

    assert view.doctor is not None
    assert view.doctor.full_name == 'Dr. Alice Morgan'
    assert view.doctor.specialty_name == 'Cardiology'
    assert view.note == 'Symptoms: cough'


def test_list_tolerates_unresolved_doctor_and_specialty(clinic_db, add_appointment) -> None:
    add_appointment(doctor_id=12, start_time=time(9, 0), end_time=time(9, 30))
    add_appointment(doctor_id=404, start_time=time(10, 0), end_time=time(10, 30))

    views = list_patient_appointments(100, clinic_db, sort_order='asc')

    assert views[0].doctor is not None
    assert views[0].doctor.specialty_name is None
    assert views[1].doctor is None


def test_list_empty_for_patient_without_appointments(clinic_db) -> None:
    assert list_patient_appointments(101, clinic_db, status_filter='upcoming') == []


def test_normalize_sort_order_defaults_to_descending() -> None:
    assert normalize_sort_order(' ASC ') == 'asc'
    assert normalize_sort_order(None) == 'desc'
    assert normalize_sort_order('sideways') == 'desc'
