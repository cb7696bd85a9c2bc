"""
Patient directory: validation, uniqueness, search and pagination.

Receptionists create and maintain records; doctors may only rewrite the
medical notes.  Storage goes through :class:`records.stores.PatientStore`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from records.exceptions import DuplicatePatient, NotFoundError, ValidationError
from records.models import MAX_PATIENT_AGE, Gender, Patient
from records.stores import PatientQuery, PatientStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


@dataclass
class PatientData:
    name: str
    age: Optional[int]
    gender: str
    contact_info: str
    medical_notes: str = ''


@dataclass
class Page:
    items: list[Patient]
    total: int
    page: int
    limit: int


def clamp_page(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    page = page if page and page >= 1 else 1
    if not limit or limit < 1:
        limit = DEFAULT_PAGE_LIMIT
    return page, min(limit, MAX_PAGE_LIMIT)


def validate_patient_data(data: PatientData) -> None:
    if not data.name:
        raise ValidationError('patient name is required')
    if data.age is None or not 0 <= data.age <= MAX_PATIENT_AGE:
        raise ValidationError('invalid patient age')
    if not data.gender:
        raise ValidationError('patient gender is required')
    if data.gender not in Gender.values:
        raise ValidationError('invalid patient gender')
    if not data.contact_info:
        raise ValidationError('patient contact information is required')


def validate_query(query: PatientQuery) -> None:
    age_min, age_max = query.age_min or 0, query.age_max or 0
    if age_min < 0:
        raise ValidationError('minimum age cannot be negative')
    if age_max > MAX_PATIENT_AGE:
        raise ValidationError(f'maximum age cannot exceed {MAX_PATIENT_AGE}')
    if age_max > 0 and age_min > age_max:
        raise ValidationError('minimum age cannot be greater than maximum age')


def _check_id(patient_id) -> None:
    if not patient_id or patient_id <= 0:
        raise ValidationError('invalid patient ID')


class PatientDirectory:

    def __init__(self, store: PatientStore):
        self.store = store

    def create(self, data: PatientData, created_by: Optional[int]) -> Patient:
        validate_patient_data(data)
        if not created_by:
            raise ValidationError('creator ID is required')
        if self.store.exists_by_name_or_contact(data.name, data.contact_info):
            raise DuplicatePatient()
        patient = self.store.create(
            name=data.name,
            age=data.age,
            gender=data.gender,
            contact_info=data.contact_info,
            medical_notes=data.medical_notes or '',
            created_by_id=created_by,
        )
        logger.info('patient %s created by user %s', patient.pk, created_by)
        return patient

    def get_by_id(self, patient_id: int) -> Patient:
        _check_id(patient_id)
        patient = self.store.find_by_id(patient_id)
        if patient is None:
            raise NotFoundError('patient not found')
        return patient

    def update(self, patient_id: int, data: PatientData) -> Patient:
        """Overwrite the demographic fields of an existing patient."""
        _check_id(patient_id)
        validate_patient_data(data)
        patient = self.get_by_id(patient_id)
        if self.store.exists_by_name_or_contact(data.name, data.contact_info, exclude_id=patient.pk):
            raise DuplicatePatient()
        patient.name = data.name
        patient.age = data.age
        patient.gender = data.gender
        patient.contact_info = data.contact_info
        self.store.update(patient, ['name', 'age', 'gender', 'contact_info'])
        logger.info('patient %s updated', patient.pk)
        return patient

    def update_medical_notes(self, patient_id: int, notes: str) -> Patient:
        _check_id(patient_id)
        self.get_by_id(patient_id)
        if not self.store.update_field(patient_id, 'medical_notes', notes):
            raise NotFoundError('patient not found')
        logger.info('medical notes updated for patient %s', patient_id)
        return self.get_by_id(patient_id)

    def delete(self, patient_id: int) -> None:
        _check_id(patient_id)
        if not self.store.delete(patient_id):
            raise NotFoundError('patient not found')
        logger.info('patient %s deleted', patient_id)

    def exists_by_name_or_contact(self, name: str, contact_info: str) -> bool:
        return self.store.exists_by_name_or_contact(name, contact_info)

    def search(self, query: PatientQuery) -> list[Patient]:
        validate_query(query)
        return self.store.search(query)

    def list(self, page: Optional[int] = None, limit: Optional[int] = None) -> Page:
        page, limit = clamp_page(page, limit)
        items, total = self.store.list(offset=(page - 1) * limit, limit=limit)
        return Page(items=items, total=total, page=page, limit=limit)
