from dataclasses import dataclass
from typing import Optional


@dataclass
class DepartmentCreateDTO:
    """DTO for creating a new department"""
    code: str
    name_en: str
    name_ar: str = ''
    description: str = ''
    parent_id: Optional[int] = None  # None for top-level departments
    is_active: bool = True


@dataclass
class DepartmentUpdateDTO:
    """DTO for updating an existing department (None = unchanged)"""
    department_id: int  # Primary Key
    code: Optional[str] = None
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    clear_parent: bool = False  # parent_id=None cannot express "move to top level"


@dataclass
class JobTitleCreateDTO:
    """DTO for creating a new job title"""
    code: str
    name_en: str
    name_ar: str = ''
    description: str = ''
    department_id: Optional[int] = None
    is_active: bool = True


@dataclass
class JobTitleUpdateDTO:
    """DTO for updating an existing job title (None = unchanged)"""
    job_title_id: int  # Primary Key
    code: Optional[str] = None
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    description: Optional[str] = None
    department_id: Optional[int] = None
    clear_department: bool = False
