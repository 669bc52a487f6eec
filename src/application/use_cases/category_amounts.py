"""Helpers resolving an expense's category and adjusting category amounts."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from src.application.ports.document_store import DocumentStorePort, WriteBatchPort
from src.application.use_cases.document_converters import (
    amount_to_document,
    category_from_document,
    updated_fields,
)
from src.application.use_cases.document_paths import category_path, expense_path
from src.application.use_cases.lookups import require_event_ids
from src.domain.errors import NotFoundError
from src.domain.models import AmountChange, Category
from src.domain.services.aggregation import apply_amount_change
from src.domain.services.validation import require_id
from src.infrastructure.logging.logger import get_app_logger
from src.utils.time_utils import utc_now


class CategoryAmountsService:
    """Read-modify-write helpers for category scheduled and spent amounts.

    Every write either commits on its own or joins a caller supplied batch.
    """

    def __init__(
        self,
        store: DocumentStorePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now

    def get_category_id_from_expense(
        self,
        owner_id: str,
        event_id: str,
        expense_id: str,
    ) -> str | None:
        """Return the category id referenced by an expense.

        Returns:
            str | None: The category id, or None when the expense is missing.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        expense_id = require_id(expense_id, "Expense ID")
        snapshot = self._store.get(expense_path(owner_id, event_id, expense_id))
        if snapshot is None:
            return None
        category = snapshot.data.get("category") or {}
        return category.get("id") or None

    def add_to_category_spent_amount(
        self,
        owner_id: str,
        event_id: str,
        category_id: str,
        amount: Decimal,
        batch: WriteBatchPort | None = None,
    ) -> Decimal:
        """Add ``amount`` to a category's spent amount.

        Returns:
            Decimal: The new spent amount.
        """
        category = self.adjust_category_amounts(
            owner_id,
            event_id,
            category_id,
            spent=AmountChange(add=amount),
            batch=batch,
        )
        return category.spent_amount

    def subtract_from_category_spent_amount(
        self,
        owner_id: str,
        event_id: str,
        category_id: str,
        amount: Decimal,
        batch: WriteBatchPort | None = None,
    ) -> Decimal:
        """Subtract ``amount`` from a category's spent amount, floored at zero.

        Returns:
            Decimal: The new spent amount.
        """
        category = self.adjust_category_amounts(
            owner_id,
            event_id,
            category_id,
            spent=AmountChange(subtract=amount),
            batch=batch,
        )
        return category.spent_amount

    def adjust_category_amounts(
        self,
        owner_id: str,
        event_id: str,
        category_id: str,
        scheduled: AmountChange | None = None,
        spent: AmountChange | None = None,
        batch: WriteBatchPort | None = None,
        missing_ok: bool = False,
    ) -> Category | None:
        """Apply scheduled and spent changes to a category.

        Args:
            owner_id: Workspace owner id.
            event_id: Event id.
            category_id: Category to adjust.
            scheduled: Change applied to ``scheduledAmount``.
            spent: Change applied to ``spentAmount``.
            batch: Optional batch the update joins instead of committing.
            missing_ok: Skip the update when the category no longer exists.

        Returns:
            Category | None: The category as it will be stored, or None when
            it is missing and ``missing_ok`` is set.

        Raises:
            NotFoundError: If the category is missing.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        category_id = require_id(category_id, "Category ID")
        path = category_path(owner_id, event_id, category_id)
        snapshot = self._store.get(path)
        if snapshot is None:
            if missing_ok:
                self._logger.warning(
                    f"Category {category_id} of event {event_id} is missing; "
                    "skipping amount adjustment"
                )
                return None
            raise NotFoundError("Category not found")

        current = category_from_document(snapshot)
        new_scheduled = apply_amount_change(current.scheduled_amount, scheduled)
        new_spent = apply_amount_change(current.spent_amount, spent)
        fields = updated_fields(owner_id, self._clock())
        if scheduled is not None:
            fields["scheduledAmount"] = amount_to_document(new_scheduled)
        if spent is not None:
            fields["spentAmount"] = amount_to_document(new_spent)

        if batch is not None:
            batch.update(path, fields)
        else:
            self._store.update(path, fields)
        return replace(
            current,
            scheduled_amount=new_scheduled,
            spent_amount=new_spent,
        )


__all__ = ["CategoryAmountsService"]
