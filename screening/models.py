"""
Database models for the test-appointment backend.

These models capture health centers, registered patients, the test
results recorded against them and the test appointments booked from
those results. JSON payloads use camelCase names; the mapping to these
snake_case fields lives in the serializers.
"""
from __future__ import annotations

import datetime

from django.db import models


class HealthCenter(models.Model):
    """A health center where patients attend test appointments.

    ``daily_capacity`` bounds how many center appointments can be booked
    on one day; slots are handed out from ``opens_at`` onwards.
    """
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    daily_capacity = models.PositiveIntegerField(default=40)
    opens_at = models.TimeField(default=datetime.time(9, 0))
    created = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class Patient(models.Model):
    """A citizen registered through the patient app.

    ``health_center`` is the patient's assigned center; center
    appointments are booked there.
    """
    first_name = models.CharField(max_length=64)
    last_name = models.CharField(max_length=128, blank=True)
    document_number = models.CharField(max_length=32, unique=True)
    birth_date = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    health_center = models.ForeignKey(
        HealthCenter, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients'
    )
    accepted_terms_at = models.DateTimeField(null=True, blank=True)
    created = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.document_number})".strip()


class TestAction(models.TextChoices):
    """Follow-up recorded on a test result."""
    __test__ = False

    SCHEDULE_TEST_APPOINTMENT_AT_HEALTH_CENTER = 'SCHEDULE_TEST_APPOINTMENT_AT_HEALTH_CENTER'
    SCHEDULE_TEST_APPOINTMENT_AT_HOME = 'SCHEDULE_TEST_APPOINTMENT_AT_HOME'


class AppointmentType(models.TextChoices):
    AT_HEALTH_CENTER = 'AT_HEALTH_CENTER'
    AT_HOME = 'AT_HOME'


class TestResult(models.Model):
    """A test result written by the test-result back office.

    ``action`` is usually one of :class:`TestAction`, but the column is
    free text so that results carrying other or no follow-up can be
    stored as well.
    """
    # keep pytest from collecting the model as a test class
    __test__ = False

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='test_results')
    action = models.CharField(max_length=64, null=True, blank=True)
    result = models.CharField(max_length=255, blank=True)
    # Set explicitly by the writer so imported results keep their timestamp
    created = models.DateTimeField(db_index=True)

    class Meta:
        indexes = [models.Index(fields=['patient', '-created'])]

    def __str__(self) -> str:
        return f"Result {self.id} for patient {self.patient_id} ({self.action or '-'})"


class TestAppointment(models.Model):
    __test__ = False

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='test_appointments')
    type = models.CharField(max_length=20, choices=AppointmentType.choices)
    health_center = models.ForeignKey(
        HealthCenter, null=True, blank=True, on_delete=models.SET_NULL, related_name='test_appointments'
    )
    appointment_date = models.DateTimeField(db_index=True)
    created = models.DateTimeField(db_index=True)

    class Meta:
        indexes = [models.Index(fields=['patient', '-created'])]

    def __str__(self) -> str:
        return f"{self.type} appointment for patient {self.patient_id} on {self.appointment_date:%Y-%m-%d %H:%M}"
