import bleach
from rest_framework import serializers

from screening.models import HealthCenter, Patient


def _clean(v):
    return bleach.clean((v or '').strip(), strip=True)


class PatientRegisterSerializer(serializers.Serializer):
    firstName = serializers.CharField(max_length=64)
    lastName = serializers.CharField(max_length=128, required=False, allow_blank=True)
    documentNumber = serializers.CharField(max_length=32)
    birthDate = serializers.DateField(required=False, allow_null=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    healthCenterId = serializers.PrimaryKeyRelatedField(
        queryset=HealthCenter.objects.all(), required=False, allow_null=True
    )
    acceptTerms = serializers.BooleanField()

    def validate_firstName(self, v):
        v = _clean(v)
        if len(v) < 2:
            raise serializers.ValidationError('first name must have at least 2 characters')
        return v

    def validate_lastName(self, v):
        return _clean(v)

    def validate_address(self, v):
        return _clean(v)

    def validate_phone(self, v):
        return _clean(v)

    def validate_documentNumber(self, v):
        v = _clean(v).upper()
        if not v:
            raise serializers.ValidationError('document number is required')
        if Patient.objects.filter(document_number=v).exists():
            raise serializers.ValidationError('a patient with this document number is already registered')
        return v

    def validate_acceptTerms(self, v):
        if v is not True:
            raise serializers.ValidationError('terms must be accepted')
        return v


class PatientSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    documentNumber = serializers.CharField(source='document_number', read_only=True)
    birthDate = serializers.DateField(source='birth_date', read_only=True)
    healthCenterId = serializers.PrimaryKeyRelatedField(source='health_center', read_only=True)

    class Meta:
        model = Patient
        fields = [
            'id', 'firstName', 'lastName', 'documentNumber', 'birthDate',
            'phone', 'email', 'address', 'healthCenterId', 'created',
        ]
        read_only_fields = fields
