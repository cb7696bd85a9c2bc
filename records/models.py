"""
Database models for the clinicdesk backend.

Two concepts live here: staff accounts (receptionists and doctors) and
the patient records they manage.  Roles and genders are closed choice
sets; anything else read from a request or from a row is rejected.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator
from django.db import models

MAX_PATIENT_AGE = 150


class Role(models.TextChoices):
    DOCTOR = 'doctor', 'Doctor'
    RECEPTIONIST = 'receptionist', 'Receptionist'

    @classmethod
    def parse(cls, value) -> 'Role | None':
        """Return the matching role, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Gender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    OTHER = 'other', 'Other'


class User(AbstractUser):
    """Staff account with a single role.

    Usernames are case-sensitive and unique.  The password column holds a
    Django hasher string and is never serialized to clients.
    """
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.RECEPTIONIST)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Patient(models.Model):
    """A patient record created by a receptionist.

    Name and contact info are each unique: a new patient is rejected when
    either one is already on file.  The two constraints close the race
    between the service-level existence check and the insert.
    """
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField(validators=[MaxValueValidator(MAX_PATIENT_AGE)])
    gender = models.CharField(max_length=10, choices=Gender.choices)
    contact_info = models.CharField(max_length=255)
    medical_notes = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='patients_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['name'], name='patient_unique_name'),
            models.UniqueConstraint(fields=['contact_info'], name='patient_unique_contact_info'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
