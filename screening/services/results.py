from typing import Optional

from django.utils import timezone

from screening.models import Patient, TestResult


def record_test_result(*, patient: Patient, action: Optional[str], result: str = '', created=None) -> TestResult:
    return TestResult.objects.create(
        patient=patient,
        action=action or None,
        result=result or '',
        created=created or timezone.now(),
    )
