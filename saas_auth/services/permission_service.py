"""
极简权限服务 - 一个静态权限表解决所有权限问题

决策是 (用户ID, 角色, 动作, 资源对象) 的纯函数: 不访问数据库，不使用缓存，
没有共享的可变状态，可以在任意多个线程中并发调用。
"""

import logging
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from ..conf import auth_settings
from ..constants import Action, Role
from ..exceptions import InvalidActionError, InvalidSubjectError
from ..policy import POLICY, Grant, grants_for, to_role
from ..subjects import Subject, describe, to_action


logger = logging.getLogger(__name__)


class Decision(NamedTuple):
    """决策结果 (派生值，不存储)"""
    allowed: bool
    reason: str
    grant: Optional[Grant] = None

    def __bool__(self):
        return self.allowed


class PermissionService:
    """极简权限服务"""

    def __init__(self, policy: Mapping[Role, Tuple[Grant, ...]] = POLICY, strict_actions: Optional[bool] = None):
        self.policy = policy
        self._strict_actions = strict_actions

    @property
    def strict_actions(self) -> bool:
        if self._strict_actions is not None:
            return self._strict_actions
        return bool(auth_settings.STRICT_ACTIONS)

    def evaluate(
        self,
        user_id: Optional[str],
        role: Union[Role, str],
        action: Union[Action, str],
        subject: Subject
    ) -> Decision:
        """
        权限决策 - 所有路由共用的唯一决策函数

        Args:
            user_id: 当前用户ID
            role: 当前用户在组织中的角色
            action: 动作 ('get', 'create', 'update', 'delete', 'transfer', ...)
            subject: 资源对象 (由调用方从领域记录构造)

        Returns:
            Decision: 任意一条匹配规则成立即允许；没有匹配规则即拒绝

        Raises:
            UnknownRole: 角色未声明
            UnknownSubjectKind: 资源类型未声明
            InvalidSubjectError: subject 不是资源对象
            InvalidActionError: 仅在 STRICT_ACTIONS 开启时，动作无效
        """
        role = to_role(role)
        if not isinstance(subject, Subject):
            raise InvalidSubjectError(f"Expected a Subject instance, got {type(subject).__name__}")
        descriptor = describe(getattr(subject, 'kind', None))

        try:
            resolved_action = to_action(action)
            if resolved_action not in descriptor.valid_actions:
                raise InvalidActionError(action, descriptor.kind.value)
        except InvalidActionError as e:
            if self.strict_actions:
                raise
            logger.warning(f"Failing closed: {e.message} (role={role.value}, user={user_id})")
            return Decision(False, f"invalid action: {e.message}")

        decision = self._decide(user_id, role, resolved_action, subject)

        if auth_settings.LOG_DECISIONS:
            logger.debug(
                f"Decision: user={user_id}, role={role.value}, action={resolved_action.value}, "
                f"subject={subject.kind.value}, allowed={decision.allowed}, reason={decision.reason}"
            )
        return decision

    def _decide(self, user_id, role: Role, action: Action, subject: Subject) -> Decision:
        matched = False
        for grant in grants_for(role, self.policy):
            if not grant.matches(action, subject.kind):
                continue
            matched = True
            if grant.allows(subject, user_id):
                if grant.condition is None:
                    reason = f"{role.value} can {grant.action.value} {grant.kind.value}"
                else:
                    reason = f"{role.value} can {grant.action.value} {grant.kind.value} when {grant.condition.name}"
                return Decision(True, reason, grant)

        if matched:
            return Decision(False, f"no condition satisfied for {role.value} {action.value} {subject.kind.value}")
        return Decision(False, f"no grant for {role.value} {action.value} {subject.kind.value}")

    def can(self, user_id, role, action, subject) -> bool:
        """是否允许"""
        return self.evaluate(user_id, role, action, subject).allowed

    def cannot(self, user_id, role, action, subject) -> bool:
        """是否拒绝 (can 的反面，方便在调用处阅读)"""
        return not self.can(user_id, role, action, subject)

    def can_on_kind(self, role: Union[Role, str], action: Union[Action, str], kind) -> bool:
        """
        类型级检查: 角色是否有任何规则覆盖 (动作, 资源类型)

        不求值条件，只说明"可能允许"。用于还没有具体资源的请求
        (比如创建)，有资源时仍需调用 evaluate。
        """
        role = to_role(role)
        descriptor = describe(kind)
        try:
            resolved_action = to_action(action)
            if resolved_action not in descriptor.valid_actions:
                raise InvalidActionError(action, descriptor.kind.value)
        except InvalidActionError as e:
            if self.strict_actions:
                raise
            logger.warning(f"Failing closed: {e.message} (role={role.value})")
            return False
        return any(grant.matches(resolved_action, descriptor.kind) for grant in grants_for(role, self.policy))

    def check_permissions(
        self,
        user_id: Optional[str],
        role: Union[Role, str],
        subject: Subject,
        actions: Iterable[Union[Action, str]]
    ) -> Dict[str, bool]:
        """
        批量权限检查

        Returns:
            Dict[str, bool]: 动作 -> 是否允许
        """
        result = {}
        for action in actions:
            key = action.value if isinstance(action, Action) else str(action)
            result[key] = self.can(user_id, role, action, subject)
        return result

    def permitted_actions(self, user_id: Optional[str], role: Union[Role, str], subject: Subject) -> List[Action]:
        """列出当前用户在资源上允许的具体动作 (不含 manage)"""
        descriptor = describe(getattr(subject, 'kind', None))
        return [
            action for action in Action
            if action != Action.MANAGE
            and action in descriptor.valid_actions
            and self.can(user_id, role, action, subject)
        ]

    def get_user_permissions(self, user_id: Optional[str], role: Union[Role, str]) -> 'Ability':
        """绑定当前用户和角色，返回 Ability"""
        return Ability(user_id, role, service=self)


class Ability:
    """
    绑定了 (用户ID, 角色) 的权限视图

    使用示例:
        ability = get_user_permissions(user_id, membership.role)
        if ability.cannot('update', project):
            raise PermissionDenied("You're not allowed to update this project.")
    """

    def __init__(self, user_id: Optional[str], role: Union[Role, str], service: Optional[PermissionService] = None):
        self.user_id = user_id
        self.role = to_role(role)
        self.service = service or default_service

    def __repr__(self):
        return f"<Ability user={self.user_id} role={self.role.value}>"

    def evaluate(self, action, subject) -> Decision:
        return self.service.evaluate(self.user_id, self.role, action, subject)

    def can(self, action, subject) -> bool:
        return self.service.can(self.user_id, self.role, action, subject)

    def cannot(self, action, subject) -> bool:
        return self.service.cannot(self.user_id, self.role, action, subject)

    def can_on_kind(self, action, kind) -> bool:
        return self.service.can_on_kind(self.role, action, kind)

    def check_permissions(self, subject, actions) -> Dict[str, bool]:
        return self.service.check_permissions(self.user_id, self.role, subject, actions)

    def permitted_actions(self, subject) -> List[Action]:
        return self.service.permitted_actions(self.user_id, self.role, subject)


default_service = PermissionService()


def get_user_permissions(user_id: Optional[str], role: Union[Role, str]) -> Ability:
    """便捷函数：获取用户在组织内的权限视图"""
    return default_service.get_user_permissions(user_id, role)
