# Organization structure
from .department import Department
from .job_title import JobTitle
