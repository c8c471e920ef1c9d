import logging

from rocketgate_dispatch.core.outcome import ErrorClass, RoutingError, Success, TransactionOutcome
from rocketgate_dispatch.core.request import TransactionRequest
from rocketgate_dispatch.gateway.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class ConfirmationOrchestrator:
    """Runs the mandatory confirmation round-trip for two-phase operations.

    A transaction that succeeded on its first leg is only complete once the
    gateway confirms it. The confirmation goes through targeted dispatch to the
    host that owns the new transaction's GUID.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher

    def confirm(self, request: TransactionRequest, outcome: TransactionOutcome) -> TransactionOutcome:
        """
        Confirm a successful outcome.

        Args:
            request: The request that produced the outcome.
            outcome: The outcome of the first leg.

        Returns:
            The original outcome if it was not a success or if the confirmation
            succeeded; otherwise the confirmation's failure, whose attempt log starts
            with the first leg's attempts.
        """
        if not isinstance(outcome, Success):
            return outcome

        if not outcome.guid:
            logger.error(f"Successful {request.kind.value} response carried no GUID; cannot confirm")
            return RoutingError(
                error_class=ErrorClass.MISSING_CONFIRMATION_GUID,
                message="Missing confirmation GUID",
                attempts=outcome.attempts,
            )

        confirm_outcome = self.dispatcher.dispatch_targeted(request.derive_confirmation(outcome.guid))
        if isinstance(confirm_outcome, Success):
            logger.info(f"Confirmed {request.kind.value} transaction {outcome.guid}")
            return outcome

        logger.error(f"Confirmation of {request.kind.value} transaction {outcome.guid} failed")
        return confirm_outcome.with_attempts(outcome.attempts + confirm_outcome.attempts)
