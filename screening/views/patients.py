"""
Patient registration endpoints used by the citizen app.

The registration form can only be submitted once the terms checkbox is
ticked; the same rule is enforced here with ``acceptTerms``.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, throttle_classes
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from screening.models import Patient
from screening.serializers.patient import PatientRegisterSerializer, PatientSerializer
from screening.services.patients import register_patient


class RegistrationRateThrottle(AnonRateThrottle):
    scope = 'registration'


@api_view(['POST'])
@throttle_classes([RegistrationRateThrottle])
def patient_register(request):
    """Register a new patient and return it."""
    data = PatientRegisterSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    v = data.validated_data
    patient = register_patient(
        first_name=v['firstName'],
        last_name=v.get('lastName', ''),
        document_number=v['documentNumber'],
        birth_date=v.get('birthDate'),
        phone=v.get('phone', ''),
        email=v.get('email', ''),
        address=v.get('address', ''),
        health_center=v.get('healthCenterId'),
    )
    return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def patient_detail(request, pk: int):
    patient = get_object_or_404(Patient, pk=pk)
    return Response(PatientSerializer(patient).data)
