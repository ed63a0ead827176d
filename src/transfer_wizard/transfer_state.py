"""Wizard state machine for creating an inventory transfer.

Screens advance select_destination -> add_products -> review -> submitting
-> success. Every event returns whether it was accepted; refused events
leave the state untouched. ``submit`` is the only coroutine: it leaves the
review screen before awaiting the submission client. A create that outlives
its timeout or an interrupted submit keeps the workflow busy until the
client call returns, so at most one create call is ever in flight.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from .exceptions import SubmissionTimeoutError
from .idempotency import IdempotencyKeys, SubmissionKeys
from .models import Location, Product, SelectionEntry, TransferRequest, TransferResult
from .selection import ProductId, SelectionSet, filter_products
from .submission import TransferSubmissionClient
from .telemetry import TelemetryLogger, build_event
from .transfer_builder import TransferRequestBuilder
from .transfer_validation import ClientValidationError
from .ui_errors import submission_error_message

logger = logging.getLogger(__name__)

PENDING_CREATE_MESSAGE = "The previous transfer request is still being processed"

TransferCreatedCallback = Callable[[TransferResult], None]
DismissCallback = Callable[[], None]


class WizardScreen(str, Enum):
    SELECT_DESTINATION = "select_destination"
    ADD_PRODUCTS = "add_products"
    REVIEW = "review"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    CLOSED = "closed"

    @property
    def title(self) -> str:
        return _SCREEN_TEXT[self][0]

    @property
    def subtitle(self) -> str:
        return _SCREEN_TEXT[self][1]


_SCREEN_TEXT = {
    WizardScreen.SELECT_DESTINATION: ("New Transfer", "Select Destination"),
    WizardScreen.ADD_PRODUCTS: ("Step 2 of 3", "Add Products"),
    WizardScreen.REVIEW: ("Step 3 of 3", "Review & Create"),
    WizardScreen.SUBMITTING: ("Creating", "Creating..."),
    WizardScreen.SUCCESS: ("Complete", "Transfer Created"),
    WizardScreen.CLOSED: ("", ""),
}

_CANCELABLE_SCREENS = {WizardScreen.SELECT_DESTINATION, WizardScreen.ADD_PRODUCTS}
_NOTES_SCREENS = {WizardScreen.ADD_PRODUCTS, WizardScreen.REVIEW}


@dataclass(frozen=True)
class WizardActionAvailability:
    can_choose_destination: bool
    can_continue: bool
    can_edit_selection: bool
    can_review: bool
    can_submit: bool
    can_go_back: bool
    can_cancel: bool
    can_acknowledge: bool


def wizard_action_availability(
    screen: WizardScreen,
    *,
    has_destination: bool,
    total_quantity: int,
    create_pending: bool = False,
) -> WizardActionAvailability:
    return WizardActionAvailability(
        can_choose_destination=screen is WizardScreen.SELECT_DESTINATION,
        can_continue=screen is WizardScreen.SELECT_DESTINATION and has_destination,
        can_edit_selection=screen is WizardScreen.ADD_PRODUCTS,
        can_review=screen is WizardScreen.ADD_PRODUCTS and total_quantity > 0,
        can_submit=(
            screen is WizardScreen.REVIEW and has_destination and total_quantity > 0 and not create_pending
        ),
        can_go_back=screen in {WizardScreen.SELECT_DESTINATION, WizardScreen.ADD_PRODUCTS, WizardScreen.REVIEW},
        can_cancel=screen in _CANCELABLE_SCREENS,
        can_acknowledge=screen is WizardScreen.SUCCESS,
    )


@dataclass(frozen=True)
class ReviewSummary:
    source_name: str
    destination_name: str | None
    product_count: int
    total_quantity: int
    entries: tuple[SelectionEntry, ...]
    notes: str | None


class TransferWorkflow:
    def __init__(
        self,
        source_location: Location,
        submission_client: TransferSubmissionClient,
        *,
        on_transfer_created: TransferCreatedCallback | None = None,
        on_dismiss: DismissCallback | None = None,
        submit_timeout_seconds: float | None = None,
        store_id: str | None = None,
        created_by_user_id: str | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self._builder = TransferRequestBuilder(
            source_location,
            SelectionSet(),
            store_id=store_id,
            created_by_user_id=created_by_user_id,
        )
        self._client = submission_client
        self._on_transfer_created = on_transfer_created
        self._on_dismiss = on_dismiss
        self._submit_timeout_seconds = submit_timeout_seconds
        self._telemetry = telemetry
        self._keys = SubmissionKeys()
        self._screen = WizardScreen.SELECT_DESTINATION
        self._error_message: str | None = None
        self._result: TransferResult | None = None
        self._pending_create: asyncio.Future[TransferResult] | None = None
        self.search_text = ""

    # -- read-only state ---------------------------------------------------

    @property
    def screen(self) -> WizardScreen:
        return self._screen

    @property
    def is_closed(self) -> bool:
        return self._screen is WizardScreen.CLOSED

    @property
    def source_location(self) -> Location:
        return self._builder.source_location

    @property
    def destination(self) -> Location | None:
        return self._builder.destination

    @property
    def selection(self) -> SelectionSet:
        return self._builder.selection

    @property
    def notes(self) -> str | None:
        return self._builder.notes

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def result(self) -> TransferResult | None:
        return self._result

    @property
    def create_pending(self) -> bool:
        """True while a create call the workflow stopped waiting for is still running."""
        return self._pending_create is not None and not self._pending_create.done()

    def availability(self) -> WizardActionAvailability:
        return wizard_action_availability(
            self._screen,
            has_destination=self.destination is not None,
            total_quantity=self.selection.total_quantity(),
            create_pending=self.create_pending,
        )

    def candidate_destinations(self, all_locations: Iterable[Location]) -> list[Location]:
        return self._builder.candidate_destinations(all_locations)

    def visible_products(self, catalog: Iterable[Product]) -> Sequence[Product]:
        return filter_products(catalog, self.search_text)

    def review_summary(self) -> ReviewSummary:
        destination = self.destination
        entries = self.selection.items()
        return ReviewSummary(
            source_name=self.source_location.name,
            destination_name=destination.name if destination else None,
            product_count=len(entries),
            total_quantity=self.selection.total_quantity(),
            entries=entries,
            notes=self.notes,
        )

    # -- destination screen ------------------------------------------------

    def choose_destination(self, location: Location) -> bool:
        if self._screen is not WizardScreen.SELECT_DESTINATION:
            return self._refuse("choose_destination")
        if not self._builder.try_set_destination(location):
            logger.info(
                "destination_refused",
                extra={"source_location_id": self.source_location.id, "location_id": location.id},
            )
            return False
        return True

    def continue_to_products(self) -> bool:
        if self._screen is not WizardScreen.SELECT_DESTINATION or self.destination is None:
            return self._refuse("continue_to_products")
        self._navigate(WizardScreen.ADD_PRODUCTS)
        return True

    # -- product screen ----------------------------------------------------

    def toggle_product(self, product: Product) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS:
            return self._refuse("toggle_product")
        self.selection.toggle(product)
        return True

    def set_quantity(self, product_id: ProductId, value: int | float) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS:
            return self._refuse("set_quantity")
        self.selection.set_quantity(product_id, value)
        return True

    def increment(self, product_id: ProductId) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS:
            return self._refuse("increment")
        self.selection.increment(product_id)
        return True

    def decrement(self, product_id: ProductId) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS:
            return self._refuse("decrement")
        self.selection.decrement(product_id)
        return True

    def remove_product(self, product_id: ProductId) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS:
            return self._refuse("remove_product")
        self.selection.remove(product_id)
        return True

    def clear_selection(self) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS:
            return self._refuse("clear_selection")
        self.selection.clear()
        return True

    def set_notes(self, text: str | None) -> bool:
        if self._screen not in _NOTES_SCREENS:
            return self._refuse("set_notes")
        self._builder.notes = text
        return True

    def review(self) -> bool:
        if self._screen is not WizardScreen.ADD_PRODUCTS or self.selection.total_quantity() <= 0:
            return self._refuse("review")
        self._navigate(WizardScreen.REVIEW)
        return True

    # -- navigation ----------------------------------------------------------

    def back(self) -> bool:
        if self._screen is WizardScreen.SELECT_DESTINATION:
            return self.cancel()
        if self._screen is WizardScreen.ADD_PRODUCTS:
            self._navigate(WizardScreen.SELECT_DESTINATION)
            return True
        if self._screen is WizardScreen.REVIEW:
            self._error_message = None
            self._navigate(WizardScreen.ADD_PRODUCTS)
            return True
        return self._refuse("back")

    def cancel(self) -> bool:
        if self._screen not in _CANCELABLE_SCREENS:
            return self._refuse("cancel")
        callback = self._on_dismiss
        self._close()
        if callback is not None:
            callback()
        return True

    def dismiss_error(self) -> bool:
        if self._error_message is None:
            return False
        self._error_message = None
        return True

    # -- submission ----------------------------------------------------------

    async def submit(self) -> bool:
        if self._screen is not WizardScreen.REVIEW:
            return self._refuse("submit")
        if self.create_pending:
            logger.info("transfer_submit_busy")
            self._error_message = PENDING_CREATE_MESSAGE
            return False
        try:
            request = self._builder.build()
        except ClientValidationError as exc:
            self._error_message = str(exc)
            return self._refuse("submit")

        keys = self._keys.keys_for(request)
        self._error_message = None
        self._navigate(WizardScreen.SUBMITTING)
        logger.info(
            "transfer_submit_attempt",
            extra={
                "transaction_id": keys.transaction_id,
                "destination_location_id": request.destination_location_id,
                "item_count": len(request.items),
                "total_quantity": request.total_quantity,
            },
        )
        started = time.monotonic()
        try:
            result = await self._create(request, keys)
        except asyncio.CancelledError:
            self._fail_submission("Transfer creation was interrupted", "cancelled", started)
            raise
        except Exception as exc:
            logger.warning(
                "transfer_submit_failed",
                extra={"transaction_id": keys.transaction_id, "error": type(exc).__name__},
            )
            self._fail_submission(submission_error_message(exc), type(exc).__name__, started)
            return False

        self._result = result
        self._navigate(WizardScreen.SUCCESS)
        logger.info(
            "transfer_submit_succeeded",
            extra={"transaction_id": keys.transaction_id, "transfer_id": result.id},
        )
        self._emit(
            "api_call_result",
            "transfer_create_result",
            "submit",
            success=True,
            duration_ms=_elapsed_ms(started),
        )
        return True

    def acknowledge(self) -> bool:
        if self._screen is not WizardScreen.SUCCESS or self._result is None:
            return self._refuse("acknowledge")
        result = self._result
        callback = self._on_transfer_created
        self._on_transfer_created = None
        self._close()
        if callback is not None:
            callback(result)
        return True

    async def _create(self, request: TransferRequest, keys: IdempotencyKeys) -> TransferResult:
        # The worker thread cannot be stopped; shield it so a timeout or
        # cancellation only stops the wait, and keep it as the pending create.
        call = asyncio.ensure_future(asyncio.to_thread(self._client.create, request, idempotency_keys=keys))
        self._pending_create = call
        call.add_done_callback(self._create_settled)
        if self._submit_timeout_seconds is None:
            return await asyncio.shield(call)
        try:
            return await asyncio.wait_for(asyncio.shield(call), timeout=self._submit_timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise SubmissionTimeoutError(self._submit_timeout_seconds) from exc

    def _create_settled(self, call: asyncio.Future[TransferResult]) -> None:
        if self._pending_create is call:
            self._pending_create = None
        if call.cancelled():
            return
        error = call.exception()
        if self._screen is not WizardScreen.SUBMITTING:
            logger.info(
                "transfer_create_settled_late",
                extra={"outcome": "failed" if error else "succeeded", "error": type(error).__name__ if error else None},
            )

    def _fail_submission(self, message: str, error_code: str, started: float) -> None:
        self._error_message = message
        self._navigate(WizardScreen.REVIEW)
        self._emit(
            "api_call_result",
            "transfer_create_result",
            "submit",
            success=False,
            duration_ms=_elapsed_ms(started),
            error_code=error_code,
        )

    # -- internals -----------------------------------------------------------

    def _close(self) -> None:
        self._builder.reset()
        self._result = None
        self._error_message = None
        self._navigate(WizardScreen.CLOSED)

    def _navigate(self, screen: WizardScreen) -> None:
        previous = self._screen
        self._screen = screen
        logger.info("navigation", extra={"from_screen": previous.value, "to_screen": screen.value})
        self._emit("navigation", "screen_view", screen.value)

    def _refuse(self, event: str) -> bool:
        logger.debug("event_refused", extra={"event": event, "screen": self._screen.value})
        return False

    def _emit(self, category: str, name: str, action: str, **fields: Any) -> None:
        if self._telemetry is None:
            return
        try:
            self._telemetry.emit(build_event(category=category, name=name, action=action, **fields))
        except (OSError, ValueError):
            logger.warning("telemetry_emit_failed", extra={"category": category, "event_name": name}, exc_info=True)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
