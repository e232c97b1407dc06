"""
Django测试配置 - 用于SaaS Auth Library测试
"""

import os

# 基础配置
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEBUG = True
SECRET_KEY = 'test-secret-key-for-testing-only-please-change-in-production'
ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

# 应用配置
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'saas_auth',
]

MIDDLEWARE = []

# 授权核心不访问数据库，测试只需要内存数据库占位
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# 国际化
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
    'UNAUTHENTICATED_USER': None,
}

SAAS_AUTH = {
    'STRICT_ACTIONS': False,
    'LOG_DECISIONS': False,
    'USER_ID_ATTRIBUTE': 'auth_user_id',
    'ROLE_ATTRIBUTE': 'auth_role',
    'VALIDATE_POLICY_ON_STARTUP': True,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'saas_auth': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': True,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}
