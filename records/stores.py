"""
ORM-backed stores for staff accounts and patient records.

These are thin wrappers over the Django ORM.  Services depend on them
rather than on the models so the rules in ``records.services`` read as
plain logic, and so the database-level uniqueness guarantees surface as
the domain's conflict errors.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone

from records.exceptions import ConflictError, DuplicatePatient, InternalError, UsernameTaken
from records.models import Patient, Role, User

PATIENT_UPDATABLE_FIELDS = ('name', 'age', 'gender', 'contact_info', 'medical_notes')


@dataclass
class PatientQuery:
    """Optional search filters; ``None``, empty and zero values mean "no constraint"."""
    name: Optional[str] = None
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    gender: Optional[str] = None
    contact_info: Optional[str] = None


class UserStore:

    def _checked(self, user: Optional[User]) -> Optional[User]:
        # Stored roles are re-validated on read
        if user is not None and Role.parse(user.role) is None:
            raise InternalError(f'user {user.pk} has unknown role {user.role!r}')
        return user

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._checked(User.objects.filter(pk=user_id).first())

    def find_by_username(self, username: str) -> Optional[User]:
        return self._checked(User.objects.filter(username=username).first())

    def exists_by_username(self, username: str) -> bool:
        return User.objects.filter(username=username).exists()

    def create(self, *, username: str, password_hash: str, role: Role) -> User:
        try:
            with transaction.atomic():
                return User.objects.create(username=username, password=password_hash, role=role)
        except IntegrityError as exc:
            raise UsernameTaken() from exc

    def update(self, user: User, fields: list[str]) -> User:
        user.save(update_fields=[*fields, 'updated_at'])
        return user

    def delete(self, user_id: int) -> bool:
        try:
            deleted, _ = User.objects.filter(pk=user_id).delete()
        except ProtectedError as exc:
            raise ConflictError('user has created patient records and cannot be deleted') from exc
        return deleted > 0

    def list(self) -> list[User]:
        return [self._checked(u) for u in User.objects.order_by('id')]


class PatientStore:

    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        return Patient.objects.filter(pk=patient_id).first()

    def exists_by_name_or_contact(self, name: str, contact_info: str, *, exclude_id: Optional[int] = None) -> bool:
        qs = Patient.objects.filter(name=name) | Patient.objects.filter(contact_info=contact_info)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def create(self, **fields) -> Patient:
        try:
            with transaction.atomic():
                return Patient.objects.create(**fields)
        except IntegrityError as exc:
            raise DuplicatePatient() from exc

    def update(self, patient: Patient, fields: list[str]) -> Patient:
        try:
            with transaction.atomic():
                patient.save(update_fields=[*fields, 'updated_at'])
        except IntegrityError as exc:
            raise DuplicatePatient() from exc
        return patient

    def update_field(self, patient_id: int, field: str, value) -> int:
        """Write a single column and return the number of rows touched."""
        if field not in PATIENT_UPDATABLE_FIELDS:
            raise ValueError(f'field {field!r} cannot be updated on its own')
        return Patient.objects.filter(pk=patient_id).update(**{field: value, 'updated_at': timezone.now()})

    def delete(self, patient_id: int) -> int:
        deleted, _ = Patient.objects.filter(pk=patient_id).delete()
        return deleted

    def list(self, *, offset: int, limit: int) -> tuple[list[Patient], int]:
        qs = Patient.objects.order_by('id')
        total = qs.count()
        # Pages past the end never reach the database, whatever their size
        if offset >= total:
            return [], total
        return list(qs[offset:offset + limit]), total

    def search(self, query: PatientQuery) -> list[Patient]:
        qs = Patient.objects.all()
        if query.name:
            qs = qs.filter(name__icontains=query.name)
        if query.age_min:
            qs = qs.filter(age__gte=query.age_min)
        if query.age_max:
            qs = qs.filter(age__lte=query.age_max)
        if query.gender:
            qs = qs.filter(gender=query.gender)
        if query.contact_info:
            qs = qs.filter(contact_info__icontains=query.contact_info)
        return list(qs.order_by('id'))
