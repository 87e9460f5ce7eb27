from rest_framework import serializers

from screening.models import AppointmentType, HealthCenter, Patient, TestAppointment
from screening.serializers.health_center import HealthCenterSerializer

COMPUTED_FIELDS = ('id', 'type')

# wire name -> model field, for filter/where/order
APPOINTMENT_FIELDS = {
    'id': 'id',
    'patientId': 'patient_id',
    'type': 'type',
    'healthCenterId': 'health_center_id',
    'appointmentDate': 'appointment_date',
    'created': 'created',
}


class TestAppointmentDraftSerializer(serializers.Serializer):
    """Body of ``POST /test-appointments``; only the patient is supplied."""
    __test__ = False

    patientId = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        preset = [f for f in COMPUTED_FIELDS if f in self.initial_data]
        if preset:
            raise serializers.ValidationError({f: 'is computed and must not be set' for f in preset})
        return attrs

    def validate_patientId(self, v):
        if not Patient.objects.filter(id=v).exists():
            raise serializers.ValidationError('patient not found')
        return v


class TestAppointmentSerializer(serializers.ModelSerializer):
    __test__ = False

    patientId = serializers.PrimaryKeyRelatedField(source='patient', queryset=Patient.objects.all())
    type = serializers.ChoiceField(choices=AppointmentType.choices)
    healthCenterId = serializers.PrimaryKeyRelatedField(
        source='health_center', queryset=HealthCenter.objects.all(), allow_null=True, required=False
    )
    appointmentDate = serializers.DateTimeField(source='appointment_date')
    created = serializers.DateTimeField(required=False)

    class Meta:
        model = TestAppointment
        fields = ['id', 'patientId', 'type', 'healthCenterId', 'appointmentDate', 'created']
        read_only_fields = ['id']

    def validate(self, attrs):
        instance = self.instance if isinstance(self.instance, TestAppointment) else None
        if instance is not None and not self.partial:
            # PUT replaces the whole record
            attrs.setdefault('health_center', None)

        appointment_type = attrs.get('type', getattr(instance, 'type', None))
        if appointment_type is None and attrs.get('health_center') is not None:
            # bulk update: matched rows may be home appointments
            raise serializers.ValidationError({'type': 'required when setting healthCenterId'})
        if appointment_type == AppointmentType.AT_HOME:
            if attrs.get('health_center') is not None:
                raise serializers.ValidationError({'healthCenterId': 'home appointments have no health center'})
            attrs['health_center'] = None
        return attrs


class TestAppointmentWithRelationsSerializer(TestAppointmentSerializer):
    healthCenter = HealthCenterSerializer(source='health_center', read_only=True)

    class Meta(TestAppointmentSerializer.Meta):
        fields = TestAppointmentSerializer.Meta.fields + ['healthCenter']
