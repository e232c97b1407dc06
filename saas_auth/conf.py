"""
SaaS Auth Library - 极简配置
所有配置都有默认值，通过 settings.SAAS_AUTH 覆盖
"""

import os

from django.conf import settings


class SaasAuthSettings:
    """
    极简配置类 - 读取时才访问 Django settings
    """

    DEFAULTS = {
        # 动作不适用于资源类型时: False 拒绝 (fail closed)，True 抛出 InvalidActionError
        'STRICT_ACTIONS': False,
        # 每次决策都记录 DEBUG 日志
        'LOG_DECISIONS': False,
        # 适配层从 request 读取当前用户和角色的属性名
        'USER_ID_ATTRIBUTE': 'auth_user_id',
        'ROLE_ATTRIBUTE': 'auth_role',
        # 应用启动时校验权限表
        'VALIDATE_POLICY_ON_STARTUP': True,
    }

    BOOLEAN_SETTINGS = ('STRICT_ACTIONS', 'LOG_DECISIONS', 'VALIDATE_POLICY_ON_STARTUP')

    @property
    def user_settings(self):
        # 未配置 Django 时 (比如独立使用或 CLI) 只用默认值
        if not settings.configured:
            return {}
        return getattr(settings, 'SAAS_AUTH', {})

    def __getattr__(self, name):
        """智能配置获取"""
        if name.startswith('_'):
            raise AttributeError(name)

        # 1. 先检查用户是否显式配置
        user_settings = self.user_settings
        if name in user_settings:
            return user_settings[name]

        # 2. 检查环境变量
        env_value = os.getenv(f'SAAS_AUTH_{name}')
        if env_value is not None:
            if name in self.BOOLEAN_SETTINGS:
                return env_value.lower() in ('1', 'true', 'yes', 'on')
            return env_value

        # 3. 默认值
        if name in self.DEFAULTS:
            return self.DEFAULTS[name]

        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")


# 全局配置实例
auth_settings = SaasAuthSettings()


def get_auth_setting(name, default=None):
    """便捷函数：获取配置项"""
    try:
        return getattr(auth_settings, name)
    except AttributeError:
        return default
