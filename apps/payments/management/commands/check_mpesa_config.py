from django.core.management.base import BaseCommand, CommandError

from apps.payments.services import MpesaConfig


class Command(BaseCommand):
    help = 'Show which M-Pesa providers run live and which fall back to sandbox'

    def add_arguments(self, parser):
        parser.add_argument(
            '--require-live',
            action='store_true',
            help='Exit with an error unless every provider is in live mode',
        )

    def handle(self, *args, **options):
        config = MpesaConfig.from_settings()

        sandbox_providers = []
        for name, credentials in sorted(config.providers.items()):
            marker = ' (default)' if name == config.default_provider else ''
            keys = 'credentials set' if credentials.has_credentials else 'no credentials'
            self.stdout.write(f"{name}{marker}: {credentials.mode.value} - {keys} - {credentials.base_url}")
            if not credentials.is_live:
                sandbox_providers.append(name)

        if options['require_live'] and sandbox_providers:
            raise CommandError(f"Providers not in live mode: {', '.join(sandbox_providers)}")

        self.stdout.write(self.style.SUCCESS(f"Checked {len(config.providers)} M-Pesa providers"))
