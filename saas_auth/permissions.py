"""
Django REST framework 权限类
"""

import logging

from rest_framework.exceptions import ParseError
from rest_framework.permissions import BasePermission

from .conf import auth_settings
from .constants import METHOD_ACTIONS
from .exceptions import InvalidSubjectError, UnknownRole, UnknownSubjectKind
from .services import Ability
from .subjects import is_valid_action, subject_from, to_kind


logger = logging.getLogger(__name__)


class HasAbility(BasePermission):
    """
    基于权限表的 DRF 权限类

    视图属性:
        subject_kind: 资源类型，如 'Project' (必需)
        ability_action: 固定动作；未设置时按 HTTP 方法映射 (GET -> get, PUT -> update ...)
        get_ability_subject(request): 可选，返回视图级检查的资源记录 (比如创建项目时的组织)

    当前用户ID和角色从 request 上读取 (auth_user_id / auth_role，可配置)，
    request 上没有时读取视图的同名属性。未声明的角色一律拒绝。

    没有 get_ability_subject 时，has_permission 做类型级检查: 角色必须
    至少有一条覆盖 (动作, 资源类型) 的规则，否则拒绝 (比如 BILLING 创建项目)。

    使用示例:
        class ProjectDetail(generics.RetrieveUpdateDestroyAPIView):
            permission_classes = [HasAbility]
            subject_kind = 'Project'
    """

    message = "You're not allowed to perform this action."

    def has_permission(self, request, view):
        ability = self._ability(request, view)
        if ability is None:
            return False

        action, kind = self._action_and_kind(request, view)
        get_subject = getattr(view, 'get_ability_subject', None)
        if get_subject is not None:
            return self._check(ability, action, kind, get_subject(request))

        # 没有视图级资源时按类型检查，具体资源再由 has_object_permission 判断
        allowed = ability.can_on_kind(action, kind)
        if not allowed:
            logger.debug(
                f"DRF permission denied: user={ability.user_id}, role={ability.role.value}, "
                f"no grant for {action} {kind.value}"
            )
        return allowed

    def has_object_permission(self, request, view, obj):
        ability = self._ability(request, view)
        if ability is None:
            return False
        action, kind = self._action_and_kind(request, view)
        return self._check(ability, action, kind, obj)

    def _ability(self, request, view):
        user_id = _lookup(request, view, auth_settings.USER_ID_ATTRIBUTE)
        role = _lookup(request, view, auth_settings.ROLE_ATTRIBUTE)
        if not user_id or not role:
            return None
        try:
            return Ability(user_id, role)
        except UnknownRole as e:
            logger.warning(f"DRF permission denied: {e.message} (user={user_id})")
            return None

    def _action_and_kind(self, request, view):
        action = getattr(view, 'ability_action', None) or METHOD_ACTIONS.get(request.method)
        try:
            kind = to_kind(getattr(view, 'subject_kind', None))
        except UnknownSubjectKind as e:
            raise ParseError(e.message)
        if action is None or not is_valid_action(kind, action):
            raise ParseError(f"Action {action!r} is not valid for {kind.value}")
        return action, kind

    def _check(self, ability, action, kind, record):
        try:
            subject = subject_from(kind, record)
        except InvalidSubjectError as e:
            raise ParseError(e.message)

        decision = ability.evaluate(action, subject)
        if not decision.allowed:
            logger.debug(f"DRF permission denied: user={ability.user_id}, reason={decision.reason}")
        return decision.allowed


def _lookup(request, view, name):
    value = getattr(request, name, None)
    if value is None:
        value = getattr(view, name, None)
    return value
