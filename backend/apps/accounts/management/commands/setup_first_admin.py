import os
from getpass import getpass
from django.core.management.base import BaseCommand, CommandError
from apps.accounts.services import AccountService
from apps.utils.exceptions import BusinessLogicException


class Command(BaseCommand):
    help = 'Creates the first administrator. Does nothing once an admin exists.'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=os.getenv('DJANGO_ADMIN_EMAIL'))
        parser.add_argument('--first-name', default=os.getenv('DJANGO_ADMIN_FIRST_NAME', 'Admin'))
        parser.add_argument('--last-name', default=os.getenv('DJANGO_ADMIN_LAST_NAME', 'Kamindoktor'))
        parser.add_argument(
            '--no-input',
            action='store_true',
            help='Read the password from DJANGO_ADMIN_PASSWORD instead of prompting',
        )

    def handle(self, *args, **options):
        if not AccountService.setup_required():
            self.stdout.write(self.style.SUCCESS('Administrator already exists. Skipping.'))
            return

        email = options['email']
        if not email:
            raise CommandError('E-mail missing. Pass --email or set DJANGO_ADMIN_EMAIL.')

        password = os.getenv('DJANGO_ADMIN_PASSWORD')
        if not password and not options['no_input']:
            password = getpass('Password: ')
        if not password:
            raise CommandError('Password missing. Set DJANGO_ADMIN_PASSWORD.')

        try:
            user = AccountService.setup_first_admin(
                email=email,
                password=password,
                first_name=options['first_name'],
                last_name=options['last_name'],
            )
        except BusinessLogicException as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f'Administrator {user.email} created.'))
