from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RoleCreateDTO:
    """DTO for creating a new role"""
    name_en: str
    name_ar: str = ''
    description_en: str = ''
    description_ar: str = ''
    is_active: bool = True
    has_full_access: bool = False
    permissions: List[str] = field(default_factory=list)  # "module:action" ids


@dataclass
class RoleUpdateDTO:
    """DTO for updating an existing role (None = unchanged)"""
    role_id: int
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    has_full_access: Optional[bool] = None
    permissions: Optional[List[str]] = None
