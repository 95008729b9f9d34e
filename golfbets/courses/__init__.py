from .models import CourseHole, CourseTee

__all__ = ["CourseHole", "CourseTee"]
