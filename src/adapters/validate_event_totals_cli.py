"""CLI adapter reporting events whose stored totals drifted.

The check is read-only. Set ``OWNER_ID`` to restrict it to one workspace.
The process exits with status 1 when drift is found.
"""

import os
import sys

from src.infrastructure.container import build_validate_use_case
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Run the event totals validation use case."""
    logger = get_app_logger()
    owner_id = os.getenv("OWNER_ID") or None
    use_case = build_validate_use_case()

    drifts = use_case.execute(owner_id=owner_id)

    for drift in drifts:
        target = f"{drift.owner_id}/{drift.event_id}"
        if drift.category_id:
            target += f"/categories/{drift.category_id}"
        line = (
            f"{target} {drift.field}: stored={drift.stored} "
            f"expected={drift.expected}"
        )
        logger.warning(line)
        print(line)
    if drifts:
        print(f"Found {len(drifts)} drifted totals.")
        sys.exit(1)
    print("All event totals are consistent.")


if __name__ == "__main__":  # pragma: no cover
    main()
