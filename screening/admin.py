"""
Django admin registrations for the screening models.

The test-result back office records results through ``/admin/``; the
other registrations let staff inspect patients, centers and bookings.
"""

from django.contrib import admin

from .models import HealthCenter, Patient, TestAppointment, TestResult


@admin.register(HealthCenter)
class HealthCenterAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'daily_capacity', 'opens_at', 'created')
    search_fields = ('name', 'address')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'document_number', 'health_center', 'created')
    list_filter = ('health_center',)
    search_fields = ('first_name', 'last_name', 'document_number', 'phone', 'email')


@admin.register(TestResult)
class TestResultAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'action', 'result', 'created')
    list_filter = ('action',)
    search_fields = ('patient__document_number', 'patient__last_name')


@admin.register(TestAppointment)
class TestAppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'type', 'health_center', 'appointment_date', 'created')
    list_filter = ('type', 'health_center')
    search_fields = ('patient__document_number', 'patient__last_name')
