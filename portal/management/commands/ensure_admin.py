# portal/management/commands/ensure_admin.py
import os

from django.core.management.base import BaseCommand, CommandError

from portal.models import Administrator


class Command(BaseCommand):
    help = "Ensure an administrator account exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
        parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
        parser.add_argument("--name", default=os.getenv("ADMIN_NAME", "Administrator"))

    def handle(self, *args, **opts):
        email, password, name = opts["email"], opts["password"], opts["name"]
        if not email or not password:
            raise CommandError("--email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD) are required")

        email = Administrator.objects.normalize_email(email.strip())
        user = Administrator.objects.filter(email=email).first()
        if user is None:
            Administrator.objects.create_superuser(email=email, password=password, name=name)
            self.stdout.write(self.style.SUCCESS(f"created: {email}"))
            return

        # reset password and re-enable the account
        user.set_password(password)
        user.name = name or user.name
        user.is_active = True
        user.save(update_fields=["password", "name", "is_active"])
        self.stdout.write(self.style.SUCCESS(f"ok: {email}"))
