import logging
import time

import stripe
from django.core.management.base import BaseCommand
from rest_framework.exceptions import APIException

from payments.services.checkout import configure_stripe, session_metadata, session_value
from payments.services.settlement import PAID, settle_paid_session

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Settle recent paid Stripe Checkout sessions that never reached verify or the webhook."

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, default=100, help="Maximum number of sessions to inspect.")
        parser.add_argument(
            "--since-hours",
            type=int,
            default=None,
            help="Only inspect sessions created within this many hours.",
        )

    def handle(self, *args, **options):
        try:
            configure_stripe()
        except RuntimeError as exc:
            logger.error("Stripe sync skipped: %s", exc)
            self.stdout.write(self.style.WARNING(f"Stripe sync skipped: {exc}"))
            return

        params = {"limit": min(options["limit"], 100)}
        if options["since_hours"]:
            params["created"] = {"gte": int(time.time()) - options["since_hours"] * 3600}

        inspected = settled = skipped = failed = 0
        try:
            sessions = stripe.checkout.Session.list(**params).auto_paging_iter()
            for session in sessions:
                if inspected >= options["limit"]:
                    break
                inspected += 1
                metadata = session_metadata(session)
                booking_id = metadata.get("bookingId")
                if not booking_id or session_value(session, "payment_status") != PAID:
                    skipped += 1
                    continue
                try:
                    result = settle_paid_session(
                        session,
                        booking_id=booking_id,
                        acting_user_id=metadata.get("userId"),
                    )
                except APIException as exc:
                    failed += 1
                    logger.warning("Could not settle session %s for booking %s: %s", session.id, booking_id, exc)
                    continue
                if result.already_processed:
                    skipped += 1
                else:
                    settled += 1
        except stripe.StripeError as exc:
            logger.exception("Stripe sync aborted while listing sessions: %s", exc)

        summary = f"Inspected {inspected} sessions: {settled} settled, {skipped} skipped, {failed} failed."
        logger.info(summary)
        self.stdout.write(self.style.SUCCESS(summary))
