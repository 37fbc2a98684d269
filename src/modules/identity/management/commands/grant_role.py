from django.core.management.base import BaseCommand, CommandError

from modules.identity.models import AppRole
from modules.identity.repositories import IdentityDjangoRepository
from modules.identity.services import IdentityService


class Command(BaseCommand):
    help = "Grant a role (admin or employee) to an identity."

    def add_arguments(self, parser):
        parser.add_argument("user_id", help="Identity (token subject) to grant the role to.")
        parser.add_argument("role", choices=AppRole.values)

    def handle(self, *args, **options):
        service = IdentityService(IdentityDjangoRepository())
        try:
            user_role = service.grant_role(options["user_id"], options["role"])
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(f"Granted role={user_role.role} to user_id={user_role.user_id}")
        )
