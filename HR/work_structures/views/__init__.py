from .department_views import (
    department_list,
    department_detail,
    department_toggle_activity,
    department_bulk_delete,
    department_bulk_toggle,
    department_model_history,
    department_entity_history
)
from .job_title_views import (
    job_title_list,
    job_title_detail,
    job_title_toggle_activity,
    job_title_bulk_delete,
    job_title_bulk_toggle,
    job_title_model_history,
    job_title_entity_history
)
