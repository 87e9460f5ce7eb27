import logging

from django.db import transaction
from django.utils import timezone

from screening.models import Patient

logger = logging.getLogger(__name__)


@transaction.atomic
def register_patient(*, first_name, document_number, last_name='', birth_date=None, phone='', email='',
                     address='', health_center=None) -> Patient:
    """Create a patient from the registration form.

    Only called once the terms were accepted, so the acceptance time is
    the registration time.
    """
    now = timezone.now()
    patient = Patient.objects.create(
        first_name=first_name,
        last_name=last_name or '',
        document_number=document_number,
        birth_date=birth_date,
        phone=phone or '',
        email=email or '',
        address=address or '',
        health_center=health_center,
        accepted_terms_at=now,
    )
    logger.info('registered patient %s (health center %s)', patient.id, patient.health_center_id)
    return patient
