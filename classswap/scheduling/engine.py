from collections import deque
from typing import Deque, List, Optional

from ..catalog import Catalog, StudentDirectory
from ..enrollment import swap
from ..errors import NotFoundError
from ..logging_setup import get_logger
from ..models import BatchResult, ClassId, Decision, RejectedRequest, Request
from .evaluator import BalanceParams, RequestEvaluator
from .validation import check_state

logger = get_logger(__name__)

ON_MISSING_CHOICES = ("raise", "skip")


class EnrollmentEngine:
    """Owns the catalog and the student directory and applies class change requests.

    Requests are queued by submit() and drained in submission order by
    process_all(); each one is judged against the state left by the ones
    before it.
    """

    def __init__(self, catalog: Catalog, directory: StudentDirectory,
                 params: Optional[BalanceParams] = None, evaluator: Optional[RequestEvaluator] = None):
        self.catalog = catalog
        self.directory = directory
        self.evaluator = evaluator or RequestEvaluator(catalog, directory, params)
        self._pending: Deque[Request] = deque()
        self.accepted: List[Request] = []
        self.rejected: List[RejectedRequest] = []

    @property
    def params(self) -> BalanceParams:
        return self.evaluator.params

    @property
    def pending(self) -> List[Request]:
        return list(self._pending)

    def submit(self, student_id: str, class_id: ClassId) -> Request:
        request = Request(student_id, class_id)
        self._pending.append(request)
        return request

    def process_all(self, on_missing: str = "raise", check_invariants: bool = False) -> BatchResult:
        """Drain the pending queue.

        on_missing="raise" lets a NotFoundError escape; the offending request
        is dropped and the rest stay queued. on_missing="skip" logs it and
        records it in BatchResult.skipped instead.
        """
        if on_missing not in ON_MISSING_CHOICES:
            raise ValueError(f"on_missing must be one of {ON_MISSING_CHOICES}")
        if check_invariants:
            check_state(self.catalog, self.directory)

        batch = BatchResult()
        while self._pending:
            request = self._pending.popleft()
            try:
                decision = self.process(request)
            except NotFoundError as exc:
                if on_missing == "raise":
                    raise
                logger.warning("Request skipped", student=request.student_id,
                               target=str(request.class_id), error=str(exc))
                batch.skipped.append(request)
                continue
            if decision.accepted:
                batch.accepted.append(request)
            else:
                batch.rejected.append(RejectedRequest(request, decision.reason, decision.detail))

        logger.info("Batch processed", accepted=len(batch.accepted),
                    rejected=len(batch.rejected), skipped=len(batch.skipped))
        return batch

    def process(self, request: Request) -> Decision:
        decision = self.evaluator.evaluate(request)
        if decision.accepted:
            old = self.swap_enrollment(request.student_id, request.class_id)
            self.accepted.append(request)
            logger.debug("Request accepted", student=request.student_id,
                         left=str(old) if old else None, joined=str(request.class_id))
        else:
            self.rejected.append(RejectedRequest(request, decision.reason, decision.detail))
            logger.debug("Request rejected", student=request.student_id, target=str(request.class_id),
                         reason=decision.reason.value, detail=decision.detail)
        return decision

    def swap_enrollment(self, student_id: str, class_id: ClassId) -> Optional[ClassId]:
        """Move the student into class_id, leaving their section of that course if they hold one.

        The only run-time path that changes rosters. Returns the section left.
        """
        student = self.directory.lookup(student_id)
        new = self.catalog.lookup(class_id)
        held = student.class_for(class_id.course_id)
        old = self.catalog.lookup(held) if held is not None else None
        return swap(student, old, new)
