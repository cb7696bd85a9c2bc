# records/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand

from records.models import Role, User
from records.services.passwords import PasswordHasher

TEST_PASSWORD = "123456"
TEST_SET = [
    ("doctor1", Role.DOCTOR),
    ("reception1", Role.RECEPTIONIST),
]


class Command(BaseCommand):
    help = "Ensure demo staff users exist with password=123456 (idempotent)."

    def handle(self, *args, **opts):
        hasher = PasswordHasher()
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": hasher.hash(TEST_PASSWORD), "is_active": True},
            )
            if not created:
                # reset password, role and active flag
                u.password = hasher.hash(TEST_PASSWORD)
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active", "updated_at"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role.value})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
