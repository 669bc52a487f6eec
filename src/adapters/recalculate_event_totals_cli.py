"""CLI adapter rebuilding event totals from categories and expenses.

This module wires the RecalculateAllEventTotalsUseCase to the configured
document store and provides a command-line entry point for repair and
migration runs. Set ``OWNER_ID`` to restrict the run to one workspace.
"""

import os

from src.infrastructure.container import build_recalculate_use_case
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Run the event totals recalculation use case."""
    logger = get_app_logger()
    owner_id = os.getenv("OWNER_ID") or None
    use_case = build_recalculate_use_case()

    result = use_case.run(owner_id=owner_id)

    for key, message in sorted(result.failures.items()):
        logger.error(f"Recalculation failed for {key}: {message}")
    print(
        f"Recalculated totals for {result.events_updated} of "
        f"{result.events_processed} events "
        f"({len(result.failures)} failures)."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
