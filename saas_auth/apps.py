import logging

from django.apps import AppConfig


logger = logging.getLogger(__name__)


class SaasAuthConfig(AppConfig):
    """SaaS Auth 应用配置"""

    name = 'saas_auth'
    verbose_name = 'SaaS Auth'

    def ready(self):
        """应用初始化时校验权限表 - 权限表只在启动时构建一次"""
        from .conf import auth_settings

        if auth_settings.VALIDATE_POLICY_ON_STARTUP:
            from .policy import validate_policy
            # 权限表无效时直接失败，不允许带着错误的规则启动
            validate_policy()
        else:
            logger.info("SaaS Auth policy validation skipped")
