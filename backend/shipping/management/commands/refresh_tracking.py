from __future__ import annotations

import logging
from typing import List

from django.core.management.base import BaseCommand, CommandError

from orders.models import Delivery
from shipping.carriers import load as load_carrier
from shipping.carriers.errors import CarrierAuthError, CarrierError
from shipping.delivery_state import TERMINAL_STATUSES
from shipping.services.shipment_flow import refresh_tracking

logger = logging.getLogger(__name__)


def parse_awbs(arg: str) -> List[str]:
    return [part.strip() for part in (arg or "").split(",") if part.strip()]


class Command(BaseCommand):
    help = "Pull carrier tracking for open deliveries (or the given AWBs) and update their status."

    def add_arguments(self, parser):
        parser.add_argument("--awb", type=str, help="Comma-separated AWB codes; defaults to every non-terminal delivery with an AWB")
        parser.add_argument("--provider", type=str, default=None, help="Carrier provider (shiprocket|mock); defaults to FULFILLMENT['CARRIER_PROVIDER']")

    def handle(self, *args, **options):
        awbs = parse_awbs(options.get("awb"))
        if not awbs:
            awbs = list(
                Delivery.objects.exclude(status__in=TERMINAL_STATUSES)
                .exclude(carrier_awb__isnull=True)
                .exclude(carrier_awb="")
                .values_list("carrier_awb", flat=True)
            )
        if not awbs:
            self.stdout.write(self.style.WARNING("No open deliveries with an AWB to refresh."))
            return

        try:
            client = load_carrier(options.get("provider")) if options.get("provider") else None
        except ValueError as e:
            raise CommandError(str(e))

        failures = 0
        for awb in awbs:
            try:
                snapshot, update = refresh_tracking(awb, client=client)
            except CarrierAuthError as e:
                raise CommandError(f"Carrier authentication failed: {e}")
            except CarrierError as e:
                failures += 1
                logger.warning("Tracking refresh failed for %s: %s", awb, e)
                self.stdout.write(self.style.ERROR(f"{awb}: {e}"))
                continue

            if update is None:
                self.stdout.write(f"{awb}: {snapshot.shipment_status or snapshot.current_status} (no delivery on record)")
            elif update.changed:
                self.stdout.write(self.style.SUCCESS(f"{awb}: {update.previous_status} -> {update.status}"))
            else:
                self.stdout.write(f"{awb}: unchanged ({update.status})")

        self.stdout.write("-" * 20)
        if failures:
            self.stdout.write(self.style.ERROR(f"Refreshed {len(awbs) - failures} of {len(awbs)} shipments."))
        else:
            self.stdout.write(self.style.SUCCESS(f"Refreshed {len(awbs)} shipments."))
