from typing import Optional

from ..catalog import Catalog, StudentDirectory
from ..models import ClassSection, Decision, RejectReason, Request, Student


class BalanceParams:
    """Class-size balancing knobs for the sections of one course.

    A request is refused when the course's sections already differ in size
    by max_spread or more, or when the target section has reached
    total // students_per_extra + base_allowance students.
    """

    def __init__(self, max_spread=4, students_per_extra=16, base_allowance=4):
        if students_per_extra <= 0:
            raise ValueError("students_per_extra must be positive")
        self.max_spread = max_spread
        self.students_per_extra = students_per_extra
        self.base_allowance = base_allowance

    def ceiling(self, total: int) -> int:
        return total // self.students_per_extra + self.base_allowance

    def __repr__(self):
        return (f"BalanceParams(max_spread={self.max_spread}, "
                f"students_per_extra={self.students_per_extra}, base_allowance={self.base_allowance})")


class RequestEvaluator:
    """Accept/reject decisions against the current catalog and directory. Never mutates."""

    def __init__(self, catalog: Catalog, directory: StudentDirectory, params: Optional[BalanceParams] = None):
        self.catalog = catalog
        self.directory = directory
        self.params = params or BalanceParams()

    def evaluate(self, request: Request) -> Decision:
        """Raises NotFoundError when the request names an unknown student or section."""
        student = self.directory.lookup(request.student_id)
        desired = self.catalog.lookup(request.class_id)

        clash = self.find_collision(student, desired)
        if clash is not None:
            return Decision(RejectReason.COLLISION, f"collides with {clash.class_id}")

        over = self.capacity_problem(desired)
        if over is not None:
            return Decision(RejectReason.CAPACITY, over)
        return Decision()

    def find_collision(self, student: Student, desired: ClassSection) -> Optional[ClassSection]:
        """First held section (other than one of the same course) sharing time with desired."""
        for class_id in student.classes:
            if class_id.same_course(desired.class_id):
                continue
            held = self.catalog.lookup(class_id)
            if held.collides_with(desired):
                return held
        return None

    def capacity_problem(self, desired: ClassSection) -> Optional[str]:
        sizes = [s.roster_size for s in self.catalog.sections_of_course(desired.class_id.course_id)]
        spread = max(sizes) - min(sizes)
        if spread >= self.params.max_spread:
            return f"course spread {spread} >= {self.params.max_spread}"
        ceiling = self.params.ceiling(sum(sizes))
        if desired.roster_size >= ceiling:
            return f"section holds {desired.roster_size} >= ceiling {ceiling}"
        return None
