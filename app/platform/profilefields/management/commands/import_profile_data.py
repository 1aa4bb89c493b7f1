"""
Management command to import user profile field values from a CSV file.
Run: django-admin import_profile_data users.csv

The CSV needs a ``username`` column plus one ``profile_field_<shortname>``
column per field. Cells may hold option labels or keys; multiple selection
cells list them separated by ", ".
"""

import csv
import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from app.platform.profilefields.exceptions import ProfileFieldValidationError
from app.platform.profilefields.services import import_profile_data

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Import user profile field values from a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the CSV file')
        parser.add_argument(
            '--delimiter',
            default=',',
            help='CSV column delimiter (default: ",")',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Validate every row without saving anything',
        )

    def handle(self, *args, **options):
        User = get_user_model()
        dry_run = options['dry_run']

        try:
            with open(options['csv_path'], newline='', encoding='utf-8') as handle:
                rows = list(csv.DictReader(handle, delimiter=options['delimiter']))
        except OSError as exc:
            raise CommandError(f"Cannot read {options['csv_path']}: {exc}")

        if rows and 'username' not in rows[0]:
            raise CommandError('CSV file must have a "username" column')

        self.stdout.write(self.style.SUCCESS(f"Importing profile data for {len(rows)} rows..."))

        succeeded = failed = 0
        for line, row in enumerate(rows, start=2):
            username = (row.get('username') or '').strip()
            user = User.objects.filter(**{User.USERNAME_FIELD: username}).first()
            if user is None:
                failed += 1
                self.stderr.write(f"  Line {line}: unknown user '{username}'")
                continue

            values = {key: value for key, value in row.items() if key != 'username' and value not in (None, '')}
            try:
                with transaction.atomic():
                    saved = import_profile_data(user, values)
                    if dry_run:
                        transaction.set_rollback(True)
            except ProfileFieldValidationError as exc:
                failed += 1
                for shortname, messages in exc.errors.items():
                    self.stderr.write(f"  Line {line}: {username} {shortname}: {'; '.join(messages)}")
                continue

            succeeded += 1
            self.stdout.write(f"  Line {line}: {username} updated {', '.join(sorted(saved)) or 'nothing'}")

        logger.info(f"Profile CSV import finished: {succeeded} succeeded, {failed} failed")
        summary = f"Done: {succeeded} succeeded, {failed} failed"
        if dry_run:
            summary += " (dry run, nothing saved)"
        self.stdout.write(self.style.SUCCESS(summary) if not failed else self.style.WARNING(summary))
