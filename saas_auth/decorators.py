"""
SaaS Auth 装饰器 - 极简权限检查
"""

import logging
from functools import wraps

from django.http import JsonResponse

from .conf import auth_settings
from .constants import HttpStatus
from .exceptions import (
    InvalidActionError,
    InvalidSubjectError,
    PermissionDenied,
    UnknownSubjectKind,
)
from .services import Ability
from .subjects import Subject, is_valid_action, subject_from


logger = logging.getLogger(__name__)


def require_ability(action, subject, user_id=None, role=None):
    """
    权限检查装饰器 - 极简API

    Args:
        action: 动作，如 'update', 'delete', 'transfer'
        subject: 资源对象的获取方式
            - 直接传 Subject 对象
            - 从参数获取: "project" (参数值是 Subject)
            - 按类型构造: ("Project", "project") 参数值是领域记录，
              通过 subject_from 构造；第二项支持 "request.xxx" 和 "obj.attr" 路径
        user_id: 用户ID的获取方式，默认 "request.<USER_ID_ATTRIBUTE>"
        role: 角色的获取方式，默认 "request.<ROLE_ATTRIBUTE>"

    通过检查后，request.ability 上挂载当前用户的 Ability，视图可以继续做细粒度检查。

    使用示例:
        @require_ability('update', ('Project', 'project'))
        def update_project(request, project):
            # 有权限才执行这里

        @require_ability(
            'transfer',
            ('Organization', 'request.organization'),
            role='request.membership.role'
        )
        def transfer_organization(request):
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            user_source = user_id or f"request.{auth_settings.USER_ID_ATTRIBUTE}"
            role_source = role or f"request.{auth_settings.ROLE_ATTRIBUTE}"

            # 获取用户ID
            user_uuid = _resolve_value(user_source, request, *args, **kwargs)
            if not user_uuid:
                return _error_response('User ID required', 'USER_ID_MISSING', HttpStatus.UNAUTHORIZED)

            # 获取角色
            member_role = _resolve_value(role_source, request, *args, **kwargs)
            if not member_role:
                return _error_response(
                    'Membership role required', 'PERMISSION_DENIED', HttpStatus.FORBIDDEN
                )

            # 构造资源对象，动作必须适用于资源类型
            try:
                target = _resolve_subject(subject, request, *args, **kwargs)
                if not is_valid_action(target.kind, action):
                    raise InvalidActionError(action, target.kind.value)
            except (UnknownSubjectKind, InvalidActionError, InvalidSubjectError) as e:
                logger.warning(f"Bad authorization request: {e.message}")
                return _error_response(e.message, 'BAD_REQUEST', HttpStatus.BAD_REQUEST)

            # 检查权限
            ability = Ability(user_uuid, member_role)
            if ability.cannot(action, target):
                logger.debug(
                    f"Permission denied: user={user_uuid}, role={member_role}, "
                    f"action={action}, subject={target.kind.value}"
                )
                return _error_response(
                    f"You're not allowed to {action} this {target.kind.value.lower()}.",
                    'PERMISSION_DENIED',
                    HttpStatus.FORBIDDEN
                )

            request.ability = ability

            # 权限检查通过，执行视图函数
            try:
                return view_func(request, *args, **kwargs)
            except PermissionDenied as e:
                return _error_response(e.message, 'PERMISSION_DENIED', HttpStatus.FORBIDDEN)

        return wrapper
    return decorator


def _error_response(message, code, status):
    return JsonResponse({'error': message, 'code': code}, status=status)


def _resolve_subject(subject, request, *args, **kwargs):
    """解析资源对象"""
    if isinstance(subject, Subject):
        return subject

    if isinstance(subject, tuple):
        kind, source = subject
        record = _resolve_value(source, request, *args, **kwargs)
        if record is None:
            raise InvalidSubjectError(f"{kind} record not found for '{source}'")
        return subject_from(kind, record)

    value = _resolve_value(subject, request, *args, **kwargs)
    if not isinstance(value, Subject):
        raise InvalidSubjectError(f"'{subject}' did not resolve to a subject")
    return value


def _resolve_value(value, request, *args, **kwargs):
    """
    解析参数值，支持多种来源

    Args:
        value: 要解析的值，可以是字符串或直接值
        request: Django request对象
        *args: 函数位置参数
        **kwargs: 函数关键字参数

    Returns:
        解析后的实际值
    """
    # 如果直接传值（不是字符串），直接返回
    if not isinstance(value, str):
        return value

    # 解析字符串表达式
    if value.startswith('request.'):
        # 从request对象获取，如 "request.auth_user_id"
        attr_path = value[len('request.'):]
        return _get_nested_attr(request, attr_path)

    elif '.' in value:
        # 从参数对象获取，如 "project.owner"
        obj_name, attr_path = value.split('.', 1)
        if obj_name in kwargs:
            return _get_nested_attr(kwargs[obj_name], attr_path)
        else:
            raise ValueError(f"Parameter '{obj_name}' not found in view function")

    elif value in kwargs:
        # 从函数参数直接获取
        return kwargs[value]

    else:
        # 静态值，直接返回
        return value


def _get_nested_attr(obj, attr_path):
    """
    获取嵌套属性值

    Args:
        obj: 对象
        attr_path: 属性路径，如 "membership.role" 或 "project.organization.id"

    Returns:
        属性值，不存在时返回 None
    """
    current = obj
    for attr in attr_path.split('.'):
        if isinstance(current, dict):
            current = current.get(attr)
        else:
            current = getattr(current, attr, None)
        if current is None:
            return None
    return current


# 便捷装饰器别名
def require_update_ability(subject, user_id=None, role=None):
    """更新权限检查"""
    return require_ability('update', subject, user_id=user_id, role=role)


def require_delete_ability(subject, user_id=None, role=None):
    """删除权限检查"""
    return require_ability('delete', subject, user_id=user_id, role=role)
