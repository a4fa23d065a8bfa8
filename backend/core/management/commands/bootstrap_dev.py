# backend/core/management/commands/bootstrap_dev.py
import os
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from core.models import StoreSettings, WeightRate

DEFAULT_WEIGHT_TIERS = [
    (Decimal("0"), Decimal("500"), Decimal("40")),
    (Decimal("500"), Decimal("2000"), Decimal("70")),
    (Decimal("2000"), Decimal("5000"), Decimal("120")),
]


class Command(BaseCommand):
    help = "Idempotently ensure a dev superuser and the store settings row (with starter weight tiers) exist."

    def add_arguments(self, parser):
        parser.add_argument("--no-tiers", action="store_true", help="Do not seed weight tiers")

    def handle(self, *args, **opts):
        User = get_user_model()
        username = os.getenv("DEV_ADMIN_USER", "admin")
        email = os.getenv("DEV_ADMIN_EMAIL", "admin@example.com")
        password = os.getenv("DEV_ADMIN_PASS", "ChangeMe123!")

        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": email, "is_staff": True, "is_superuser": True},
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Created superuser '{username}'"))
        else:
            self.stdout.write(f"Superuser '{username}' already exists")

        store = StoreSettings.load()
        self.stdout.write(
            f"Store settings: GST {store.gst_rate}%, flat shipping {store.shipping_cost}, "
            f"free above {store.free_shipping_above}"
        )

        if opts["no_tiers"] or store.weight_rates.exists():
            return
        for position, (low, high, cost) in enumerate(DEFAULT_WEIGHT_TIERS):
            WeightRate.objects.create(settings=store, position=position, min_weight=low, max_weight=high, cost=cost)
        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEFAULT_WEIGHT_TIERS)} weight tiers"))
