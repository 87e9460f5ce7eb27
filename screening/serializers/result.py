from rest_framework import serializers

from screening.models import Patient, TestResult

TEST_RESULT_FIELDS = {
    'id': 'id',
    'patientId': 'patient_id',
    'action': 'action',
    'result': 'result',
    'created': 'created',
}


class TestResultSerializer(serializers.ModelSerializer):
    __test__ = False

    patientId = serializers.PrimaryKeyRelatedField(source='patient', queryset=Patient.objects.all())
    # other or no follow-up is a valid result as well
    action = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)
    result = serializers.CharField(max_length=255, required=False, allow_blank=True)
    created = serializers.DateTimeField(required=False)

    class Meta:
        model = TestResult
        fields = ['id', 'patientId', 'action', 'result', 'created']
        read_only_fields = ['id']
