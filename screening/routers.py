"""
URL mappings for the test-appointment API.

Paths mirror the ones the citizen app calls; trailing slashes are
deliberately omitted.
"""
from django.urls import path

from .views.appointments import latest_by_patient, test_appointment_count, test_appointment_detail, test_appointments
from .views.health import healthz
from .views.health_centers import list_health_centers
from .views.patients import patient_detail, patient_register
from .views.results import test_results

urlpatterns = [
    path('healthz', healthz, name='healthz'),
    # Test appointments
    path('test-appointments', test_appointments, name='test_appointments'),
    path('test-appointments/count', test_appointment_count, name='test_appointment_count'),
    path('test-appointments/patient-id/<int:patient_id>', latest_by_patient, name='test_appointment_latest'),
    path('test-appointments/<int:pk>', test_appointment_detail, name='test_appointment_detail'),
    # Patients
    path('patients/register', patient_register, name='patient_register'),
    path('patients/<int:pk>', patient_detail, name='patient_detail'),
    # Health centers & test results
    path('health-centers', list_health_centers, name='health_centers'),
    path('test-results', test_results, name='test_results'),
]
