"""
SaaS Auth Library

多租户 SaaS 的授权核心: 组织、成员、项目，以及基于属性的权限判断。

核心设计原则：
- 一个静态权限表: 角色 -> 授权规则 (可带所有权条件)
- 一个决策函数: (用户ID, 角色, 动作, 资源对象) -> 允许/拒绝
- 默认拒绝: 无法识别的动作或资源类型永远不会被允许
- 纯函数: 不访问数据库，不依赖请求上下文
"""

__version__ = "1.0.0"
__author__ = "SaaS Auth Team"
__description__ = "多租户 SaaS 授权核心"
