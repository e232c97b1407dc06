"""
资源注册表

每种资源类型对应一个不可变的属性结构，以及该类型上合法的动作集合。
注册表在导入时构建，运行期不可修改。
"""

import logging
from collections import abc
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, ClassVar, FrozenSet, Mapping, NamedTuple, Optional, Tuple, Type, Union

from .constants import Action, SubjectKind
from .exceptions import InvalidActionError, InvalidSubjectError, UnknownSubjectKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subject:
    """被操作的资源实例 (只携带授权需要的属性)"""

    kind: ClassVar[SubjectKind]


@dataclass(frozen=True)
class UserSubject(Subject):
    kind: ClassVar[SubjectKind] = SubjectKind.USER

    id: str


@dataclass(frozen=True)
class OrganizationSubject(Subject):
    kind: ClassVar[SubjectKind] = SubjectKind.ORGANIZATION

    id: str
    owner_id: str


@dataclass(frozen=True)
class ProjectSubject(Subject):
    kind: ClassVar[SubjectKind] = SubjectKind.PROJECT

    id: str
    owner_id: str
    organization_id: str


@dataclass(frozen=True)
class MemberSubject(Subject):
    kind: ClassVar[SubjectKind] = SubjectKind.MEMBER

    id: str
    user_id: str
    organization_id: str


@dataclass(frozen=True)
class InviteSubject(Subject):
    kind: ClassVar[SubjectKind] = SubjectKind.INVITE

    id: str
    author_id: str
    organization_id: str


@dataclass(frozen=True)
class BillingSubject(Subject):
    kind: ClassVar[SubjectKind] = SubjectKind.BILLING

    organization_id: str


class SubjectDescriptor(NamedTuple):
    """资源类型描述"""
    kind: SubjectKind
    subject_class: Type[Subject]
    valid_actions: FrozenSet[Action]
    required_attributes: Tuple[str, ...]


def _descriptor(subject_class: Type[Subject], *actions: Action) -> SubjectDescriptor:
    return SubjectDescriptor(
        kind=subject_class.kind,
        subject_class=subject_class,
        valid_actions=frozenset((Action.MANAGE,) + actions),
        required_attributes=tuple(f.name for f in fields(subject_class)),
    )


_REGISTRY: Mapping[SubjectKind, SubjectDescriptor] = MappingProxyType({
    d.kind: d for d in (
        _descriptor(UserSubject, Action.GET, Action.CREATE, Action.DELETE),
        _descriptor(
            OrganizationSubject,
            Action.GET, Action.UPDATE, Action.DELETE, Action.TRANSFER, Action.INVITE,
        ),
        _descriptor(ProjectSubject, Action.GET, Action.CREATE, Action.UPDATE, Action.DELETE),
        _descriptor(MemberSubject, Action.GET, Action.UPDATE, Action.DELETE),
        _descriptor(InviteSubject, Action.GET, Action.CREATE, Action.DELETE),
        _descriptor(BillingSubject, Action.GET, Action.UPDATE),
    )
})


def to_kind(kind: Union[SubjectKind, str]) -> SubjectKind:
    """把字符串转换为 SubjectKind，未声明时抛出 UnknownSubjectKind"""
    try:
        return SubjectKind(kind)
    except ValueError:
        raise UnknownSubjectKind(kind) from None


def to_action(action: Union[Action, str]) -> Action:
    """把字符串转换为 Action，未声明时抛出 InvalidActionError"""
    try:
        return Action(action)
    except ValueError:
        raise InvalidActionError(action) from None


def kinds() -> Tuple[SubjectKind, ...]:
    return tuple(_REGISTRY)


def describe(kind: Union[SubjectKind, str]) -> SubjectDescriptor:
    """
    获取资源类型描述

    Args:
        kind: 资源类型 (枚举或字符串，如 'Project')

    Returns:
        SubjectDescriptor: 合法动作和必需属性

    Raises:
        UnknownSubjectKind: 资源类型未声明
    """
    resolved = to_kind(kind)
    try:
        return _REGISTRY[resolved]
    except KeyError:
        raise UnknownSubjectKind(kind) from None


def is_valid_action(kind: Union[SubjectKind, str], action: Union[Action, str]) -> bool:
    """动作是否适用于该资源类型 (未知动作返回 False)"""
    descriptor = describe(kind)
    try:
        return to_action(action) in descriptor.valid_actions
    except InvalidActionError:
        return False


def _camel_case(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def _read_attribute(record: Any, name: str) -> Optional[Any]:
    if isinstance(record, abc.Mapping):
        value = record.get(name)
        if value is None:
            value = record.get(_camel_case(name))
        return value
    value = getattr(record, name, None)
    if value is None:
        value = getattr(record, _camel_case(name), None)
    return value


def subject_from(kind: Union[SubjectKind, str], record: Any) -> Subject:
    """
    从领域记录构造资源对象

    记录可以是字典 (支持 owner_id / ownerId 两种键名)，也可以是任何带有
    对应属性的对象，比如 Django 模型实例 (外键的 owner_id 属性可直接使用)。
    ID 统一转换为字符串。

    Args:
        kind: 资源类型
        record: 领域记录

    Returns:
        Subject: 对应类型的资源对象

    Raises:
        UnknownSubjectKind: 资源类型未声明
        InvalidSubjectError: 记录缺少必需属性，或记录本身是其他类型的资源
    """
    descriptor = describe(kind)

    if isinstance(record, Subject):
        if record.kind != descriptor.kind:
            raise InvalidSubjectError(
                f"Expected a {descriptor.kind.value} subject, got {record.kind.value}"
            )
        return record

    values = {}
    missing = []
    for name in descriptor.required_attributes:
        value = _read_attribute(record, name)
        if value is None:
            missing.append(name)
        else:
            values[name] = str(value)

    if missing:
        logger.debug(f"Cannot build {descriptor.kind.value} subject, missing: {missing}")
        raise InvalidSubjectError(
            f"{descriptor.kind.value} subject is missing required attributes: {', '.join(missing)}"
        )

    return descriptor.subject_class(**values)
