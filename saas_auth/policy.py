"""
角色权限表

每个角色对应一组有序的授权规则 (Grant)。规则在导入时从静态定义构建，
之后不可修改；运行期不能增删规则。

OWNER 角色隐式拥有所有资源类型的 manage 权限。其他角色的规则可以带
所有权条件，条件在决策时针对资源对象和当前用户ID求值。
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .constants import OWNER_ROLE, Action, Role, SubjectKind
from .exceptions import ConfigurationError, UnknownRole
from .subjects import Subject, describe, kinds


logger = logging.getLogger(__name__)


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


class Condition:
    """规则条件 - 比较资源的某个属性和当前用户ID，属性名用于校验和审计"""

    def __init__(self, attribute: str, predicate: Callable[[Any, str], bool] = _same_id):
        self.attribute = attribute
        self.name = f"{attribute} == user_id"
        self._predicate = predicate

    def __call__(self, subject: Subject, user_id: str) -> bool:
        # 资源没有该属性时不成立
        value = getattr(subject, self.attribute, None)
        return bool(self._predicate(value, user_id))

    def __repr__(self):
        return f"<Condition {self.name}>"


# 所有权条件
is_owner = Condition('owner_id')
is_self = Condition('id')
is_author = Condition('author_id')


@dataclass(frozen=True)
class Grant:
    """授权规则: 角色可以对某类资源执行某个动作，可选条件"""

    role: Role
    action: Action
    kind: SubjectKind
    condition: Optional[Condition] = None

    @property
    def is_conditional(self) -> bool:
        return self.condition is not None

    def matches(self, action: Action, kind: SubjectKind) -> bool:
        """资源类型相同，且动作相同或规则为 manage"""
        return self.kind == kind and (self.action == action or self.action == Action.MANAGE)

    def allows(self, subject: Subject, user_id: str) -> bool:
        """无条件规则直接允许，有条件规则求值"""
        if self.condition is None:
            return True
        return self.condition(subject, user_id)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'role': self.role.value,
            'action': self.action.value,
            'subject': self.kind.value,
            'condition': self.condition.name if self.condition else None,
        }


# 静态权限定义: 角色 -> [(动作, 资源类型, 条件)]
_DEFINITION: Dict[Role, List[Tuple[Any, SubjectKind, Optional[Condition]]]] = {
    Role.ADMIN: [
        ((Action.GET, Action.UPDATE, Action.INVITE), SubjectKind.ORGANIZATION, None),
        ((Action.TRANSFER, Action.DELETE), SubjectKind.ORGANIZATION, is_owner),
        (Action.MANAGE, SubjectKind.PROJECT, None),
        (Action.MANAGE, SubjectKind.MEMBER, None),
        (Action.MANAGE, SubjectKind.INVITE, None),
        (Action.GET, SubjectKind.BILLING, None),
        (Action.GET, SubjectKind.USER, None),
    ],
    Role.MEMBER: [
        (Action.GET, SubjectKind.USER, None),
        (Action.DELETE, SubjectKind.USER, is_self),
        (Action.GET, SubjectKind.ORGANIZATION, None),
        (Action.GET, SubjectKind.MEMBER, None),
        ((Action.GET, Action.CREATE), SubjectKind.PROJECT, None),
        ((Action.UPDATE, Action.DELETE), SubjectKind.PROJECT, is_owner),
        (Action.DELETE, SubjectKind.INVITE, is_author),
    ],
    Role.BILLING: [
        (Action.GET, SubjectKind.USER, None),
        (Action.GET, SubjectKind.ORGANIZATION, None),
        (Action.MANAGE, SubjectKind.BILLING, None),
    ],
}


def _owner_grants() -> Tuple[Grant, ...]:
    return tuple(Grant(OWNER_ROLE, Action.MANAGE, kind) for kind in kinds())


def _build_grants(role: Role, rules) -> Tuple[Grant, ...]:
    grants = []
    for actions, kind, condition in rules:
        if isinstance(actions, Action):
            actions = (actions,)
        for action in actions:
            grants.append(Grant(role, action, kind, condition))
    return tuple(grants)


def build_policy(definition=None) -> Mapping[Role, Tuple[Grant, ...]]:
    """
    从静态定义构建权限表

    Args:
        definition: 角色 -> 规则列表，默认使用内置定义

    Returns:
        Mapping[Role, Tuple[Grant, ...]]: 不可变的权限表
    """
    definition = _DEFINITION if definition is None else definition
    table = {OWNER_ROLE: _owner_grants()}
    for role in Role:
        if role == OWNER_ROLE:
            continue
        table[role] = _build_grants(role, definition.get(role, ()))
    return MappingProxyType(table)


POLICY: Mapping[Role, Tuple[Grant, ...]] = build_policy()


def to_role(role: Union[Role, str]) -> Role:
    """把字符串转换为 Role (不区分大小写)，未声明时抛出 UnknownRole"""
    if isinstance(role, str) and not isinstance(role, Role):
        role = role.upper()
    try:
        return Role(role)
    except ValueError:
        raise UnknownRole(role) from None


def roles() -> Tuple[Role, ...]:
    return tuple(POLICY)


def grants_for(role: Union[Role, str], policy: Mapping[Role, Tuple[Grant, ...]] = POLICY) -> Tuple[Grant, ...]:
    """
    获取角色的所有授权规则

    Args:
        role: 角色 (枚举或字符串，如 'ADMIN')
        policy: 权限表，默认使用全局权限表

    Returns:
        Tuple[Grant, ...]: 按定义顺序排列的规则

    Raises:
        UnknownRole: 角色未声明
    """
    resolved = to_role(role)
    try:
        return policy[resolved]
    except KeyError:
        raise UnknownRole(role) from None


def validate_policy(policy: Mapping[Role, Tuple[Grant, ...]] = POLICY) -> int:
    """
    校验权限表: 每条规则的动作都必须适用于它的资源类型，
    条件读取的属性也必须是该资源类型的属性

    Returns:
        int: 规则总数

    Raises:
        ConfigurationError: 存在无效规则
    """
    problems = []
    total = 0
    for role, grants in policy.items():
        for grant in grants:
            total += 1
            if grant.role != role:
                problems.append(f"{role.value}: grant declared for {grant.role.value}")
            elif grant.action not in describe(grant.kind).valid_actions:
                problems.append(
                    f"{role.value}: {grant.action.value} is not valid for {grant.kind.value}"
                )
            elif (
                grant.condition is not None
                and grant.condition.attribute not in describe(grant.kind).required_attributes
            ):
                problems.append(
                    f"{role.value}: condition {grant.condition.name} does not apply to {grant.kind.value}"
                )

    if problems:
        raise ConfigurationError("Invalid policy: " + "; ".join(problems))

    logger.info(f"Policy validated: roles={len(policy)}, grants={total}")
    return total


def describe_policy(policy: Mapping[Role, Tuple[Grant, ...]] = POLICY) -> Dict[str, List[Dict[str, Any]]]:
    """导出权限表 (JSON 兼容)，用于审计和前端同步规则"""
    return {
        role.value: [grant.as_dict() for grant in grants]
        for role, grants in policy.items()
    }
