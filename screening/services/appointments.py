"""
Test appointment booking.

:class:`AppointmentTypeResolver` turns a patient's draft into a stored
appointment in four steps: classify the type from the patient's latest
test result, stamp ``created``, resolve the center and date for that
type, persist. Lookup failures in the first step and the center lookup
fall back to defaults; date resolution and persistence failures reach
the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from screening.exceptions import AppointmentPersistenceError, DateResolutionError
from screening.models import AppointmentType, TestAction, TestAppointment
from screening.services.lookups import AppointmentStore, HealthCenterLookup, TestResultLookup
from screening.services.scheduling import build_date_resolver

logger = logging.getLogger(__name__)

ACTION_TO_TYPE = {
    TestAction.SCHEDULE_TEST_APPOINTMENT_AT_HEALTH_CENTER.value: AppointmentType.AT_HEALTH_CENTER,
    TestAction.SCHEDULE_TEST_APPOINTMENT_AT_HOME.value: AppointmentType.AT_HOME,
}


@dataclass
class TestAppointmentDraft:
    """An appointment request before type, center and date are known."""
    __test__ = False

    patient_id: int


class AppointmentTypeResolver:
    def __init__(self, *, results: TestResultLookup, health_centers: HealthCenterLookup,
                 dates, store: AppointmentStore,
                 default_type: str = AppointmentType.AT_HEALTH_CENTER):
        if default_type not in AppointmentType.values:
            raise ImproperlyConfigured(f'unknown default appointment type: {default_type!r}')
        self.results = results
        self.health_centers = health_centers
        self.dates = dates
        self.store = store
        self.default_type = AppointmentType(default_type)

    def classify(self, patient_id: int) -> AppointmentType:
        """Pick the appointment type from the latest test result's action."""
        try:
            result = self.results.find_latest_by_patient(patient_id)
        except Exception:
            logger.warning('test result lookup failed for patient %s, using %s',
                           patient_id, self.default_type, exc_info=True)
            return self.default_type
        action = getattr(result, 'action', None)
        return ACTION_TO_TYPE.get(action, self.default_type)

    def patient_health_center_id(self, patient_id: int) -> Optional[int]:
        try:
            center = self.health_centers.get_patient_health_center(patient_id)
        except Exception:
            logger.warning('health center lookup failed for patient %s', patient_id, exc_info=True)
            return None
        return center.id if center is not None else None

    def create_appointment(self, draft: TestAppointmentDraft) -> TestAppointment:
        patient_id = draft.patient_id
        appointment_type = self.classify(patient_id)
        created = timezone.now()

        health_center_id = None
        try:
            if appointment_type == AppointmentType.AT_HEALTH_CENTER:
                health_center_id = self.patient_health_center_id(patient_id)
                appointment_date = self.dates.at_health_center(patient_id, health_center_id)
            else:
                appointment_date = self.dates.at_home(patient_id)
        except DateResolutionError:
            raise
        except Exception as e:
            raise DateResolutionError(f'appointment date could not be resolved: {e}') from e

        record = TestAppointment(
            patient_id=patient_id,
            type=appointment_type,
            health_center_id=health_center_id,
            appointment_date=appointment_date,
            created=created,
        )
        try:
            appointment = self.store.create(record)
        except Exception as e:
            raise AppointmentPersistenceError(f'appointment could not be stored: {e}') from e

        logger.info('booked %s appointment %s for patient %s on %s',
                    appointment.type, appointment.id, patient_id, appointment.appointment_date.isoformat())
        return appointment


def build_appointment_resolver() -> AppointmentTypeResolver:
    return AppointmentTypeResolver(
        results=TestResultLookup(),
        health_centers=HealthCenterLookup(),
        dates=build_date_resolver(),
        store=AppointmentStore(),
        default_type=settings.APPOINTMENT_DEFAULT_TYPE,
    )
