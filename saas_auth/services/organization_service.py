"""
组织管理服务
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from ..constants import OWNER_ROLE, PREVIOUS_OWNER_ROLE, Action, ErrorCode, Role, SubjectKind
from ..exceptions import PermissionDenied, ValidationError
from ..subjects import MemberSubject, OrganizationSubject, subject_from
from .permission_service import PermissionService, default_service


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleChange:
    """成员角色变更"""
    user_id: str
    role: Role


@dataclass(frozen=True)
class OwnershipTransfer:
    """
    所有权转让计划

    调用方必须在同一个事务中应用全部变更: 更新组织 owner_id，
    并按 role_changes 更新成员角色。
    """
    organization_id: str
    previous_owner_id: str
    new_owner_id: str
    role_changes: Tuple[RoleChange, ...]


class OrganizationService:
    """组织管理服务"""

    def __init__(self, permission_service: Optional[PermissionService] = None):
        self.permission_service = permission_service or default_service

    def plan_ownership_transfer(
        self,
        acting_user_id: str,
        role: Union[Role, str],
        organization: Any,
        target_member: Any
    ) -> OwnershipTransfer:
        """
        转让组织所有权

        Args:
            acting_user_id: 操作人ID
            role: 操作人在组织中的角色
            organization: 组织记录 (或 OrganizationSubject)
            target_member: 接收方的成员记录 (或 MemberSubject)

        Returns:
            OwnershipTransfer: 需要原子应用的变更

        Raises:
            PermissionDenied: 操作人不能转让该组织
            ValidationError: 接收方不是该组织成员，或已经是拥有者
        """
        org_subject: OrganizationSubject = subject_from(SubjectKind.ORGANIZATION, organization)

        if self.permission_service.cannot(acting_user_id, role, Action.TRANSFER, org_subject):
            logger.warning(
                f"Ownership transfer denied: user={acting_user_id}, organization={org_subject.id}"
            )
            raise PermissionDenied("You're not allowed to transfer this organization ownership")

        member: MemberSubject = subject_from(SubjectKind.MEMBER, target_member)
        if member.organization_id != org_subject.id:
            raise ValidationError(
                "Target user is not member of this organization",
                ErrorCode.NOT_A_MEMBER
            )

        if member.user_id == org_subject.owner_id:
            raise ValidationError("Target user already owns this organization")

        transfer = OwnershipTransfer(
            organization_id=org_subject.id,
            previous_owner_id=org_subject.owner_id,
            new_owner_id=member.user_id,
            role_changes=(
                RoleChange(org_subject.owner_id, PREVIOUS_OWNER_ROLE),
                RoleChange(member.user_id, OWNER_ROLE),
            )
        )

        logger.info(
            f"Ownership transfer planned: organization={transfer.organization_id}, "
            f"from={transfer.previous_owner_id}, to={transfer.new_owner_id}, by={acting_user_id}"
        )
        return transfer
