"""
SaaS Auth 业务逻辑服务
"""

from .permission_service import Ability, Decision, PermissionService, get_user_permissions
from .organization_service import OrganizationService, OwnershipTransfer, RoleChange

__all__ = [
    'Ability',
    'Decision',
    'PermissionService',
    'get_user_permissions',
    'OrganizationService',
    'OwnershipTransfer',
    'RoleChange',
]
