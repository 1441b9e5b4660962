"""Exceptions raised by the enrollment core and its loaders.

Collision and capacity rejections are ordinary outcomes and never appear
here; everything below signals bad input data or corrupted state.
"""


class ClassSwapError(Exception):
    pass


class NotFoundError(ClassSwapError, LookupError):
    pass


class ClassNotFoundError(NotFoundError):
    def __init__(self, class_id):
        self.class_id = class_id
        super().__init__(f"Class {class_id} not found")


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student {student_id} not found")


class DuplicateClassError(ClassSwapError):
    def __init__(self, class_id):
        self.class_id = class_id
        super().__init__(f"Class {class_id} registered twice")


class EnrollmentError(ClassSwapError):
    pass


class DuplicateCourseError(EnrollmentError):
    def __init__(self, student_id: str, held, wanted):
        self.student_id = student_id
        self.held = held
        self.wanted = wanted
        super().__init__(f"Student {student_id} already holds {held}, cannot also enroll in {wanted}")


class RosterIntegrityError(EnrollmentError):
    pass


class LoadError(ClassSwapError, ValueError):
    pass
