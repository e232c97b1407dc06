"""
SaaS Auth 常量定义

角色、动作、资源类型都在代码层面约束，不在数据库层面约束
"""

from enum import Enum


class Role(str, Enum):
    """成员角色 (每个组织成员关系只有一个角色)"""
    OWNER = 'OWNER'
    ADMIN = 'ADMIN'
    MEMBER = 'MEMBER'
    BILLING = 'BILLING'


class Action(str, Enum):
    """所有可用的动作"""
    MANAGE = 'manage'
    GET = 'get'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    TRANSFER = 'transfer'
    INVITE = 'invite'


class SubjectKind(str, Enum):
    """资源类型"""
    USER = 'User'
    ORGANIZATION = 'Organization'
    PROJECT = 'Project'
    MEMBER = 'Member'
    INVITE = 'Invite'
    BILLING = 'Billing'


# 拥有者角色，隐式拥有所有资源的 manage 权限
OWNER_ROLE = Role.OWNER

# 转让所有权后，原拥有者降级为此角色
PREVIOUS_OWNER_ROLE = Role.ADMIN

# HTTP 方法到动作的映射 (DRF 权限类使用)
METHOD_ACTIONS = {
    'GET': Action.GET,
    'HEAD': Action.GET,
    'OPTIONS': Action.GET,
    'POST': Action.CREATE,
    'PUT': Action.UPDATE,
    'PATCH': Action.UPDATE,
    'DELETE': Action.DELETE,
}


# HTTP 状态码
class HttpStatus:
    OK = 200
    NO_CONTENT = 204
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    INTERNAL_SERVER_ERROR = 500


# 错误代码
class ErrorCode:
    # 配置错误
    UNKNOWN_ROLE = 'unknown_role'
    UNKNOWN_SUBJECT_KIND = 'unknown_subject_kind'
    INVALID_ACTION = 'invalid_action'
    INVALID_POLICY = 'invalid_policy'

    # 权限错误
    PERMISSION_DENIED = 'permission_denied'

    # 验证错误
    VALIDATION_ERROR = 'validation_error'
    INVALID_SUBJECT = 'invalid_subject'
    NOT_A_MEMBER = 'not_a_member'
