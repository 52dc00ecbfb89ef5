# backend/app/cli/__main__.py
from __future__ import annotations

import argparse

from app.cli.seed_demo import seed_demo
from app.logging_config import configure_logging


def main() -> None:
    p = argparse.ArgumentParser(description="Load the sample portfolio into the configured database.")
    p.add_argument("--user-email", default=None, help="also create this user (for dev header auth)")
    p.add_argument("--user-name", default=None)
    args = p.parse_args()

    configure_logging()
    out = seed_demo(user_email=args.user_email, user_name=args.user_name)
    print(
        {
            "ok": True,
            "properties": len(out.property_ids),
            "tenants": len(out.tenant_ids),
            "expenses": len(out.expense_ids),
        }
    )


if __name__ == "__main__":
    main()
