"""
URL mappings for the clinicdesk API.

Trailing slashes are deliberately omitted; ``APPEND_SLASH`` is off.
"""
from django.urls import path

from .auth_views import login_view, register_view
from .views import health
from .views.patients import patients, patient_detail, patient_medical_notes, search_patients
from .views.users import users, current_user, user_detail

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    # Auth
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/register', register_view, name='register_view'),
    # Users
    path('api/users', users, name='users'),
    path('api/users/me', current_user, name='current_user'),
    path('api/users/<int:user_id>', user_detail, name='user_detail'),
    # Patients (search is registered before the id route)
    path('api/patients', patients, name='patients'),
    path('api/patients/search', search_patients, name='search_patients'),
    path('api/patients/<int:patient_id>', patient_detail, name='patient_detail'),
    path('api/patients/<int:patient_id>/medical-notes', patient_medical_notes, name='patient_medical_notes'),
]
