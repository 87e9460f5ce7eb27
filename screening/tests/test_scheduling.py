import datetime

import pytest
import requests
from django.test import override_settings
from django.utils import timezone

from screening.exceptions import DateResolutionError
from screening.models import AppointmentType, HealthCenter, TestAppointment
from screening.services.scheduling import (
    LocalAppointmentDateResolver,
    RemoteAppointmentDateResolver,
    build_date_resolver,
)

pytestmark = pytest.mark.django_db


def local(**kwargs):
    kwargs.setdefault('center_lead_days', 1)
    kwargs.setdefault('home_lead_days', 2)
    kwargs.setdefault('slot_minutes', 20)
    kwargs.setdefault('day_start_hour', 10)
    kwargs.setdefault('max_search_days', 3)
    return LocalAppointmentDateResolver(**kwargs)


def book(patient, center, when):
    return TestAppointment.objects.create(
        patient=patient, type=AppointmentType.AT_HEALTH_CENTER, health_center=center,
        appointment_date=when, created=timezone.now(),
    )


def test_home_date_is_lead_days_ahead_at_day_start():
    when = timezone.localtime(local().at_home(1))
    assert when.date() == timezone.localdate() + datetime.timedelta(days=2)
    assert when.time() == datetime.time(10, 0)


def test_center_without_id_uses_day_start():
    when = timezone.localtime(local().at_health_center(1, None))
    assert when.date() == timezone.localdate() + datetime.timedelta(days=1)
    assert when.time() == datetime.time(10, 0)


def test_unknown_center_uses_day_start():
    when = timezone.localtime(local().at_health_center(1, 999999))
    assert when.time() == datetime.time(10, 0)


def test_center_slots_follow_bookings(center, make_patient):
    patient = make_patient(health_center=center)
    resolver = local()
    first = resolver.at_health_center(patient.id, center.id)
    assert timezone.localtime(first).time() == datetime.time(9, 0)
    book(patient, center, first)

    second = resolver.at_health_center(patient.id, center.id)
    assert second - first == datetime.timedelta(minutes=20)


def test_freed_slot_is_reused_without_collision(make_patient):
    center = HealthCenter.objects.create(name='Centro Oeste', daily_capacity=5, opens_at=datetime.time(9, 0))
    patient = make_patient(health_center=center)
    resolver = local(slot_minutes=15)
    first, second, third = [book(patient, center, resolver.at_health_center(patient.id, center.id))
                            for _ in range(3)]
    first.delete()

    taken = [timezone.localtime(a.appointment_date).time() for a in (second, third)]
    when = timezone.localtime(resolver.at_health_center(patient.id, center.id)).time()
    assert when not in taken
    assert when == datetime.time(9, 0)


def test_moved_booking_frees_its_slot(make_patient):
    center = HealthCenter.objects.create(name='Centro Oeste', daily_capacity=3, opens_at=datetime.time(9, 0))
    patient = make_patient(health_center=center)
    resolver = local(slot_minutes=15)
    first = book(patient, center, resolver.at_health_center(patient.id, center.id))
    book(patient, center, resolver.at_health_center(patient.id, center.id))
    first.appointment_date += datetime.timedelta(minutes=30)
    first.save()

    when = timezone.localtime(resolver.at_health_center(patient.id, center.id)).time()
    assert when == datetime.time(9, 0)
    book(patient, center, resolver.at_health_center(patient.id, center.id))
    with pytest.raises(DateResolutionError):
        local(slot_minutes=15, max_search_days=1).at_health_center(patient.id, center.id)


def test_full_day_moves_to_next_day(center, make_patient):
    patient = make_patient(health_center=center)
    resolver = local()
    for _ in range(center.daily_capacity):
        book(patient, center, resolver.at_health_center(patient.id, center.id))

    when = timezone.localtime(resolver.at_health_center(patient.id, center.id))
    assert when.date() == timezone.localdate() + datetime.timedelta(days=2)
    assert when.time() == datetime.time(9, 0)


def test_no_slot_in_search_window_raises(center, make_patient):
    patient = make_patient(health_center=center)
    resolver = local(max_search_days=1)
    for _ in range(center.daily_capacity):
        book(patient, center, resolver.at_health_center(patient.id, center.id))

    with pytest.raises(DateResolutionError):
        resolver.at_health_center(patient.id, center.id)


def test_home_appointments_do_not_use_center_capacity(center, make_patient):
    patient = make_patient(health_center=center)
    resolver = local()
    day = resolver.at_health_center(patient.id, center.id)
    TestAppointment.objects.create(patient=patient, type=AppointmentType.AT_HOME, health_center=center,
                                   appointment_date=day, created=timezone.now())
    assert resolver.at_health_center(patient.id, center.id) == day


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


def test_remote_center_date():
    session = FakeSession(FakeResponse({'date': '2030-05-04T10:15:00+00:00'}))
    resolver = RemoteAppointmentDateResolver('http://sched.local/', timeout=3, session=session)

    when = resolver.at_health_center(7, 2)
    assert when == datetime.datetime(2030, 5, 4, 10, 15, tzinfo=datetime.timezone.utc)
    assert session.calls == [
        ('http://sched.local/appointment-date/health-center', {'patientId': 7, 'healthCenterId': 2}, 3)
    ]


def test_remote_center_date_without_center_omits_param():
    session = FakeSession(FakeResponse({'date': '2030-05-04T10:15:00Z'}))
    RemoteAppointmentDateResolver('http://sched.local', timeout=3, session=session).at_health_center(7, None)
    assert session.calls[0][1] == {'patientId': 7}


def test_remote_home_date_naive_is_made_aware():
    session = FakeSession(FakeResponse({'date': '2030-05-04T08:00:00'}))
    when = RemoteAppointmentDateResolver('http://sched.local', timeout=3, session=session).at_home(7)
    assert timezone.is_aware(when)
    assert session.calls[0][0] == 'http://sched.local/appointment-date/home'


@pytest.mark.parametrize('session', [
    FakeSession(error=requests.ConnectionError('refused')),
    FakeSession(FakeResponse({}, status_code=503)),
    FakeSession(FakeResponse(ValueError('not json'))),
    FakeSession(FakeResponse({'date': 'tomorrow'})),
    FakeSession(FakeResponse({'date': None})),
    FakeSession(FakeResponse(['2030-05-04T08:00:00'])),
])
def test_remote_failures_raise_date_resolution_error(session):
    resolver = RemoteAppointmentDateResolver('http://sched.local', timeout=3, session=session)
    with pytest.raises(DateResolutionError):
        resolver.at_home(7)


def test_build_date_resolver_picks_implementation():
    with override_settings(APPOINTMENT_DATE_SERVICE_URL=''):
        assert isinstance(build_date_resolver(), LocalAppointmentDateResolver)
    with override_settings(APPOINTMENT_DATE_SERVICE_URL='http://sched.local'):
        resolver = build_date_resolver()
        assert isinstance(resolver, RemoteAppointmentDateResolver)
        assert resolver.base_url == 'http://sched.local'
