"""
Test appointment endpoints.

``POST /test-appointments`` books an appointment through
:class:`~screening.services.appointments.AppointmentTypeResolver`; the
remaining endpoints are plain CRUD over stored appointments and accept
the client's JSON ``filter`` / ``where`` query parameters.
"""
from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from screening.models import TestAppointment
from screening.serializers.appointment import (
    APPOINTMENT_FIELDS,
    TestAppointmentDraftSerializer,
    TestAppointmentSerializer,
    TestAppointmentWithRelationsSerializer,
)
from screening.services.appointments import TestAppointmentDraft, build_appointment_resolver
from screening.services.filters import apply_filter, apply_where, included_relations, parse_query_object


def _serializer_for(flt):
    if 'healthCenter' in included_relations(flt):
        return TestAppointmentWithRelationsSerializer
    return TestAppointmentSerializer


@api_view(['GET', 'POST', 'PATCH'])
def test_appointments(request):
    """List (GET), book (POST) or bulk-update (PATCH) test appointments.

    ``POST`` takes ``{"patientId": ...}``; type, health center and date
    are computed from the patient's latest test result. ``PATCH`` applies
    a partial body to every appointment matching ``?where=`` and returns
    the number of updated rows.
    """
    if request.method == 'POST':
        data = TestAppointmentDraftSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        resolver = build_appointment_resolver()
        appointment = resolver.create_appointment(
            TestAppointmentDraft(patient_id=data.validated_data['patientId'])
        )
        return Response(TestAppointmentSerializer(appointment).data)

    if request.method == 'PATCH':
        where = parse_query_object(request.query_params.get('where'), 'where')
        data = TestAppointmentSerializer(data=request.data, partial=True)
        data.is_valid(raise_exception=True)
        with transaction.atomic():
            qs = apply_where(TestAppointment.objects.all(), where, APPOINTMENT_FIELDS)
            count = qs.update(**data.validated_data) if data.validated_data else qs.count()
        return Response({'count': count})

    flt = parse_query_object(request.query_params.get('filter'), 'filter')
    qs = apply_filter(TestAppointment.objects.all(), flt, APPOINTMENT_FIELDS)
    return Response(_serializer_for(flt)(qs, many=True).data)


@api_view(['GET'])
def test_appointment_count(request):
    where = parse_query_object(request.query_params.get('where'), 'where')
    qs = apply_where(TestAppointment.objects.all(), where, APPOINTMENT_FIELDS)
    return Response({'count': qs.count()})


@api_view(['GET', 'PATCH', 'PUT', 'DELETE'])
def test_appointment_detail(request, pk: int):
    """Read, update, replace or delete one test appointment."""
    if request.method == 'GET':
        flt = parse_query_object(request.query_params.get('filter'), 'filter')
        qs = apply_filter(TestAppointment.objects.all(), {'include': flt.get('include')}, APPOINTMENT_FIELDS)
        appointment = get_object_or_404(qs, pk=pk)
        return Response(_serializer_for(flt)(appointment).data)

    appointment = get_object_or_404(TestAppointment, pk=pk)
    if request.method == 'DELETE':
        appointment.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    data = TestAppointmentSerializer(appointment, data=request.data, partial=request.method == 'PATCH')
    data.is_valid(raise_exception=True)
    data.save()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def latest_by_patient(request, patient_id: int):
    """Return the patient's most recent appointment with its health center, or ``null``."""
    appointment = (
        TestAppointment.objects.select_related('health_center')
        .filter(patient_id=patient_id)
        .order_by('-created', '-id')
        .first()
    )
    if appointment is None:
        return Response(None)
    return Response(TestAppointmentWithRelationsSerializer(appointment).data)
