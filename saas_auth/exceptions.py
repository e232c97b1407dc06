"""
SaaS Auth 自定义异常
"""

from typing import Optional

from .constants import ErrorCode


class SaasAuthError(Exception):
    """SaaS Auth 基础异常"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(SaasAuthError):
    """配置错误 (程序员错误，不应在正常输入下出现)"""
    def __init__(self, message: str, error_code: Optional[str] = ErrorCode.INVALID_POLICY):
        super().__init__(message, error_code)


class UnknownRole(ConfigurationError):
    """未声明的角色"""
    def __init__(self, role):
        self.role = role
        super().__init__(f"Unknown role: {role!r}", ErrorCode.UNKNOWN_ROLE)


class UnknownSubjectKind(ConfigurationError):
    """未声明的资源类型"""
    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown subject kind: {kind!r}", ErrorCode.UNKNOWN_SUBJECT_KIND)


class InvalidActionError(ConfigurationError):
    """动作不存在，或不适用于该资源类型"""
    def __init__(self, action, kind=None):
        self.action = action
        self.kind = kind
        if kind is None:
            message = f"Unknown action: {action!r}"
        else:
            message = f"Action {action!r} is not valid for subject kind {kind!r}"
        super().__init__(message, ErrorCode.INVALID_ACTION)


class ValidationError(SaasAuthError):
    """验证错误"""
    def __init__(self, message: str, error_code: Optional[str] = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, error_code)


class InvalidSubjectError(ValidationError):
    """无法从记录构造资源对象"""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_SUBJECT)


class PermissionDenied(SaasAuthError):
    """权限被拒绝错误"""
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, ErrorCode.PERMISSION_DENIED)
