import html

import bleach
from rest_framework import serializers

from records.models import MAX_PATIENT_AGE, Gender, Patient
from records.services.patients import PatientData
from records.stores import PatientQuery


def _clean(v):
    # Tags are stripped; the text itself is stored unescaped
    return html.unescape(bleach.clean((v or '').strip(), strip=True)).strip()


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ['id', 'name', 'age', 'gender', 'contact_info', 'medical_notes',
                  'created_by', 'created_at', 'updated_at']
        read_only_fields = fields


class PatientWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=MAX_PATIENT_AGE)
    gender = serializers.ChoiceField(choices=Gender.choices)
    contact_info = serializers.CharField(max_length=255)

    def validate_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('patient name is required')
        return v

    def validate_contact_info(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('patient contact information is required')
        return v

    def to_patient_data(self) -> PatientData:
        vd = self.validated_data
        return PatientData(
            name=vd['name'],
            age=vd['age'],
            gender=vd['gender'],
            contact_info=vd['contact_info'],
            medical_notes=vd.get('medical_notes', ''),
        )


class PatientCreateSerializer(PatientWriteSerializer):
    medical_notes = serializers.CharField(required=False, allow_blank=True)


class PatientUpdateSerializer(PatientWriteSerializer):
    pass


class MedicalNotesSerializer(serializers.Serializer):
    medical_notes = serializers.CharField(trim_whitespace=False, allow_blank=True)


class PatientListQuerySerializer(serializers.Serializer):
    # Out-of-range values are clamped by the directory, not rejected
    page = serializers.IntegerField(required=False)
    limit = serializers.IntegerField(required=False)


class PatientSearchSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    age_min = serializers.IntegerField(required=False)
    age_max = serializers.IntegerField(required=False)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False, allow_blank=True)
    contact_info = serializers.CharField(required=False, allow_blank=True)

    def validate_name(self, v):
        return _clean(v)

    def validate_contact_info(self, v):
        return _clean(v)

    def to_query(self) -> PatientQuery:
        vd = self.validated_data
        return PatientQuery(
            name=vd.get('name') or None,
            age_min=vd.get('age_min'),
            age_max=vd.get('age_max'),
            gender=vd.get('gender') or None,
            contact_info=vd.get('contact_info') or None,
        )
