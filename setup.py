"""
SaaS Auth Library
多租户 SaaS 授权核心
"""

from setuptools import setup, find_packages
import os

# 读取 README 文件
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "SaaS Auth Library - 多租户 SaaS 授权核心"

setup(
    name="saas-auth",
    version="1.0.0",
    author="SaaS Auth Team",
    description="多租户 SaaS 授权核心 - 静态权限表 + 纯函数决策",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["saas_auth", "saas_auth.*"]),
    include_package_data=True,
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Web Environment",
        "Framework :: Django",
        "Framework :: Django :: 4.2",
        "Framework :: Django :: 5.0",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Systems Administration :: Authentication/Directory",
    ],
    keywords="django multi-tenant authorization saas organization rbac abac",
    python_requires=">=3.9",
    install_requires=[
        "Django>=4.2",
        "djangorestframework>=3.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-django>=4.5.0",
            "pytest-cov>=4.1.0",
            "black>=23.3.0",
            "flake8>=6.0.0",
            "isort>=5.12.0",
        ],
        "test": [
            "pytest>=7.4.0",
            "pytest-django>=4.5.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "saas-auth=saas_auth.cli:main",
        ],
    },
    zip_safe=False,
    platforms=["any"],
    license="MIT",
)
