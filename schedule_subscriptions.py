"""Generate the coming weeks of orders for every active subscription.

Run from cron or by hand:

    python schedule_subscriptions.py --weeks 2
"""
import argparse
from datetime import date, timedelta

from mealhub.main import create_app
from mealhub.models.assignment import Assignment
from mealhub.services.subscription_order_service import generate_subscription_orders

# -------------------------------------------------------------------
# HELPERS
# -------------------------------------------------------------------

def active_subscriptions():
    return (
        Assignment.query
        .filter_by(assignment_type="subscription", status="active")
        .order_by(Assignment.created_at)
        .all()
    )


def schedule_window(start: date, weeks: int):
    return start, start + timedelta(days=7 * weeks)


# -------------------------------------------------------------------
# MAIN LOGIC
# -------------------------------------------------------------------

def schedule_all(weeks):
    start, end = schedule_window(date.today(), weeks)
    print(f"Scheduling subscription orders {start} -> {end}")

    created = failed = 0
    for assignment in active_subscriptions():
        result = generate_subscription_orders(assignment.id, start, end)
        if result.ok:
            summary = result.value
            created += summary.orders_created
            failed += len(summary.errors)
            print(f"  {assignment.id}: {summary.orders_created} created, {len(summary.errors)} skipped")
        else:
            print(f"  {assignment.id}: {result.error.code} {result.error.message}")

    print(f"Done. {created} orders created, {failed} skipped")


# -------------------------------------------------------------------
# ENTRYPOINT
# -------------------------------------------------------------------

if __name__ == "__main__":
    cli = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    cli.add_argument("--weeks", type=int, default=1)
    args = cli.parse_args()

    app = create_app()
    with app.app_context():
        schedule_all(args.weeks)
