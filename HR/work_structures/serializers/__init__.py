from .department_serializers import (
    DepartmentReadSerializer,
    DepartmentCreateSerializer,
    DepartmentUpdateSerializer
)

from .job_title_serializers import (
    JobTitleReadSerializer,
    JobTitleCreateSerializer,
    JobTitleUpdateSerializer
)
