from typing import Optional

from screening.models import HealthCenter, Patient, TestAppointment, TestResult


class TestResultLookup:
    __test__ = False

    def find_latest_by_patient(self, patient_id: int) -> Optional[TestResult]:
        # equal timestamps: the later insert wins
        return TestResult.objects.filter(patient_id=patient_id).order_by('-created', '-id').first()


class HealthCenterLookup:
    def get_patient_health_center(self, patient_id: int) -> Optional[HealthCenter]:
        patient = Patient.objects.select_related('health_center').filter(id=patient_id).first()
        return patient.health_center if patient else None


class AppointmentStore:
    def create(self, record: TestAppointment) -> TestAppointment:
        record.save(force_insert=True)
        return record
