"""
Django management command to replay the inventory ledger and check it
against each part's stored stock quantity
"""
from django.core.management.base import BaseCommand, CommandError
from autoparts.catalog.models import Part
from autoparts.inventory.services import replay_ledger


class Command(BaseCommand):
    help = 'Replay the inventory ledger per part and report balance mismatches'

    def add_arguments(self, parser):
        parser.add_argument(
            '--part-id',
            type=int,
            help='Check specific part ID only',
        )

    def handle(self, *args, **options):
        part_id = options.get('part_id')

        if part_id:
            parts = Part.objects.filter(id=part_id)
            if not parts.exists():
                raise CommandError(f'Part with ID {part_id} not found')
        else:
            parts = Part.objects.all().order_by('id')

        checked = 0
        broken = 0
        for part in parts.iterator():
            checked += 1
            problems = replay_ledger(part)
            if problems:
                broken += 1
                self.stdout.write(self.style.ERROR(f"{part.sku} (ID {part.id}):"))
                for problem in problems:
                    self.stdout.write(f"  - {problem}")

        if broken:
            self.stdout.write(self.style.ERROR(f"{broken} of {checked} part(s) have ledger mismatches"))
            raise CommandError('Ledger verification failed')
        self.stdout.write(self.style.SUCCESS(f"Ledger consistent for {checked} part(s)"))
