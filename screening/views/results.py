"""
Test result endpoints.

Results are written by the testing back office; the booking logic only
reads the latest one per patient.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from screening.models import TestResult
from screening.serializers.result import TEST_RESULT_FIELDS, TestResultSerializer
from screening.services.filters import apply_filter, parse_query_object
from screening.services.results import record_test_result


@api_view(['GET', 'POST'])
def test_results(request):
    if request.method == 'POST':
        data = TestResultSerializer(data=request.data)
        data.is_valid(raise_exception=True)
        v = data.validated_data
        result = record_test_result(
            patient=v['patient'],
            action=v.get('action'),
            result=v.get('result', ''),
            created=v.get('created'),
        )
        return Response(TestResultSerializer(result).data, status=status.HTTP_201_CREATED)

    flt = parse_query_object(request.query_params.get('filter'), 'filter')
    qs = apply_filter(TestResult.objects.all(), flt, TEST_RESULT_FIELDS, relations={})
    return Response(TestResultSerializer(qs, many=True).data)
