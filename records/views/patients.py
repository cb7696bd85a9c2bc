"""
Patient record views.

Doctors and receptionists can list and read patients.  Creating,
editing, deleting and searching are receptionist tasks; doctors may
only rewrite a patient's medical notes.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsDoctor, IsReceptionist, ReceptionistWritesStaffReads
from records.serializers.patient import (
    MedicalNotesSerializer,
    PatientCreateSerializer,
    PatientListQuerySerializer,
    PatientSearchSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from records.services.patients import PatientDirectory
from records.stores import PatientStore


def _directory() -> PatientDirectory:
    return PatientDirectory(PatientStore())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, ReceptionistWritesStaffReads])
def patients(request):
    if request.method == 'POST':
        return _create_patient(request)
    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    page = _directory().list(q.validated_data.get('page'), q.validated_data.get('limit'))
    return Response({
        'ok': True,
        'data': PatientSerializer(page.items, many=True).data,
        'pagination': {'total': page.total, 'page': page.page, 'limit': page.limit},
    })


def _create_patient(request):
    s = PatientCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = _directory().create(s.to_patient_data(), created_by=request.user.id)
    return Response({'ok': True, 'data': PatientSerializer(patient).data}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, ReceptionistWritesStaffReads])
def patient_detail(request, patient_id: int):
    directory = _directory()
    if request.method == 'GET':
        patient = directory.get_by_id(patient_id)
        return Response({'ok': True, 'data': PatientSerializer(patient).data})
    if request.method == 'PUT':
        s = PatientUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = directory.update(patient_id, s.to_patient_data())
        return Response({'ok': True, 'data': PatientSerializer(patient).data})
    directory.delete(patient_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsDoctor])
def patient_medical_notes(request, patient_id: int):
    s = MedicalNotesSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = _directory().update_medical_notes(patient_id, s.validated_data['medical_notes'])
    return Response({'ok': True, 'data': PatientSerializer(patient).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsReceptionist])
def search_patients(request):
    """Filter patients.
    Query params (all optional, combined with AND):
      - name: substring, case-insensitive
      - age_min, age_max: inclusive bounds, 0 means unbounded
      - gender: male|female|other
      - contact_info: substring, case-insensitive
    """
    q = PatientSearchSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    results = _directory().search(q.to_query())
    return Response({'ok': True, 'data': PatientSerializer(results, many=True).data})
