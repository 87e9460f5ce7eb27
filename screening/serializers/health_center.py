from rest_framework import serializers

from screening.models import HealthCenter


class HealthCenterSerializer(serializers.ModelSerializer):
    dailyCapacity = serializers.IntegerField(source='daily_capacity', read_only=True)
    opensAt = serializers.TimeField(source='opens_at', read_only=True, format='%H:%M')

    class Meta:
        model = HealthCenter
        fields = ['id', 'name', 'address', 'phone', 'dailyCapacity', 'opensAt', 'created']
        read_only_fields = fields
