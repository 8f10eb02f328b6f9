from .department_service import DepartmentService
from .job_title_service import JobTitleService

__all__ = [
    'DepartmentService',
    'JobTitleService',
]
