from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class UserCreateDTO:
    """DTO for creating a new user"""
    email: str
    name_en: str
    password: str
    name_ar: str = ''
    username: str = ''
    phone: str = ''
    is_active: bool = True
    has_full_access: bool = False
    role_id: Optional[int] = None
    department_id: Optional[int] = None
    job_title_id: Optional[int] = None
    permissions: List[str] = field(default_factory=list)  # direct "module:action" grants


@dataclass
class UserUpdateDTO:
    """DTO for updating an existing user (None = unchanged, clear_* = set to null)"""
    user_id: int  # Primary Key
    email: Optional[str] = None
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    has_full_access: Optional[bool] = None
    role_id: Optional[int] = None
    department_id: Optional[int] = None
    job_title_id: Optional[int] = None
    permissions: Optional[List[str]] = None
    clear_role: bool = False
    clear_department: bool = False
    clear_job_title: bool = False
