"""
Django admin registrations for the records models.

Superusers can inspect staff accounts and patient records via the
``/admin/`` URL during development.
"""

from django.contrib import admin

from .models import Patient, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_active', 'created_at')
    list_filter = ('role', 'is_active')
    search_fields = ('username',)
    exclude = ('password',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'age', 'gender', 'contact_info', 'created_by', 'created_at')
    list_filter = ('gender',)
    search_fields = ('name', 'contact_info')
