"""
Appointment date resolution.

Two resolvers share the same interface: ``at_health_center(patient_id,
health_center_id)`` and ``at_home(patient_id)``, each returning an aware
``datetime``. The local resolver books against center capacity in this
database; the remote one asks the external scheduling service.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, time
from typing import Optional

import requests
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from screening.exceptions import DateResolutionError
from screening.models import AppointmentType, HealthCenter, TestAppointment

logger = logging.getLogger(__name__)


def _at(day, at: time) -> datetime:
    return timezone.make_aware(datetime.combine(day, at), timezone.get_current_timezone())


class LocalAppointmentDateResolver:
    """Hand out the first free center slot and home visits after a lead time."""

    def __init__(self, *, center_lead_days: Optional[int] = None, home_lead_days: Optional[int] = None,
                 slot_minutes: Optional[int] = None, day_start_hour: Optional[int] = None,
                 max_search_days: Optional[int] = None):
        self.center_lead_days = settings.APPOINTMENT_CENTER_LEAD_DAYS if center_lead_days is None else center_lead_days
        self.home_lead_days = settings.APPOINTMENT_HOME_LEAD_DAYS if home_lead_days is None else home_lead_days
        self.slot_minutes = slot_minutes or settings.APPOINTMENT_SLOT_MINUTES
        self.day_start = time(settings.APPOINTMENT_DAY_START_HOUR if day_start_hour is None else day_start_hour)
        self.max_search_days = max_search_days or settings.APPOINTMENT_MAX_SEARCH_DAYS

    def at_health_center(self, patient_id: int, health_center_id: Optional[int]) -> datetime:
        first_day = timezone.localdate() + timedelta(days=self.center_lead_days)
        center = HealthCenter.objects.filter(id=health_center_id).first() if health_center_id else None
        if center is None:
            return _at(first_day, self.day_start)
        if center.daily_capacity < 1:
            raise DateResolutionError(f'health center {center.id} takes no appointments')

        for offset in range(self.max_search_days):
            day = first_day + timedelta(days=offset)
            start = _at(day, time.min)
            booked = list(TestAppointment.objects.filter(
                health_center=center,
                type=AppointmentType.AT_HEALTH_CENTER,
                appointment_date__gte=start,
                appointment_date__lt=start + timedelta(days=1),
            ).values_list('appointment_date', flat=True))
            if len(booked) >= center.daily_capacity:
                continue
            # deleted or moved bookings leave gaps in the day
            taken = set(booked)
            opening = _at(day, center.opens_at)
            for k in range(center.daily_capacity):
                slot = opening + timedelta(minutes=k * self.slot_minutes)
                if slot not in taken:
                    return slot
        raise DateResolutionError(
            f'health center {center.id} has no free slot in the next {self.max_search_days} days'
        )

    def at_home(self, patient_id: int) -> datetime:
        return _at(timezone.localdate() + timedelta(days=self.home_lead_days), self.day_start)


class RemoteAppointmentDateResolver:
    """Client for the external scheduling service.

    ``GET {base}/appointment-date/health-center?patientId=&healthCenterId=``
    and ``GET {base}/appointment-date/home?patientId=`` both answer
    ``{"date": "<ISO-8601>"}``.
    """

    def __init__(self, base_url: str, timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout or settings.APPOINTMENT_DATE_SERVICE_TIMEOUT
        self.session = session or requests.Session()

    def at_health_center(self, patient_id: int, health_center_id: Optional[int]) -> datetime:
        params = {'patientId': patient_id}
        if health_center_id is not None:
            params['healthCenterId'] = health_center_id
        return self._fetch('appointment-date/health-center', params)

    def at_home(self, patient_id: int) -> datetime:
        return self._fetch('appointment-date/home', {'patientId': patient_id})

    def _fetch(self, path: str, params: dict) -> datetime:
        url = f'{self.base_url}/{path}'
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning('scheduling service call %s failed: %s', url, e)
            raise DateResolutionError(f'scheduling service unavailable: {e}') from e

        raw = data.get('date') if isinstance(data, dict) else None
        try:
            value = parse_datetime(raw) if isinstance(raw, str) else None
        except ValueError:
            value = None
        if value is None:
            raise DateResolutionError(f'scheduling service returned no usable date: {raw!r}')
        if timezone.is_naive(value):
            value = timezone.make_aware(value, timezone.get_current_timezone())
        return value


def build_date_resolver():
    if settings.APPOINTMENT_DATE_SERVICE_URL:
        return RemoteAppointmentDateResolver(settings.APPOINTMENT_DATE_SERVICE_URL)
    return LocalAppointmentDateResolver()
