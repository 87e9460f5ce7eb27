from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from screening.models import HealthCenter
from screening.serializers.health_center import HealthCenterSerializer


@api_view(['GET'])
def list_health_centers(request):
    """Return all health centers ordered by name."""
    centers = HealthCenter.objects.order_by('name', 'id')
    return Response(HealthCenterSerializer(centers, many=True).data)
