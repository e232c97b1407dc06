"""
SaaS Auth CLI 工具
提供命令行接口用于审计权限表和检查单个决策
"""

import argparse
import json
import sys

from .exceptions import SaasAuthError
from .policy import describe_policy, to_role, validate_policy
from .services import PermissionService
from .subjects import subject_from


def main(argv=None):
    """CLI 主入口"""
    parser = argparse.ArgumentParser(
        description='SaaS Auth 权限表工具',
        prog='saas-auth'
    )
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # 打印权限表命令
    policy_parser = subparsers.add_parser('policy', help='打印并校验权限表')
    policy_parser.add_argument('--role', help='只显示该角色')
    policy_parser.add_argument('--format', choices=['table', 'json'], default='table', help='输出格式')

    # 检查权限命令
    check_parser = subparsers.add_parser('check', help='检查一次权限决策')
    check_parser.add_argument('--user-id', required=True, help='用户ID')
    check_parser.add_argument('--role', required=True, help='角色')
    check_parser.add_argument('--action', required=True, help='动作')
    check_parser.add_argument('--kind', required=True, help='资源类型，如 Project')
    check_parser.add_argument(
        '--attr',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help='资源属性，可重复，如 --attr owner_id=u1'
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # 执行对应命令
    try:
        if args.command == 'policy':
            return show_policy(args)
        elif args.command == 'check':
            return check_permission(args)
    except SaasAuthError as e:
        print(f"错误: {e.message}", file=sys.stderr)
        return 1
    return 0


def show_policy(args):
    """打印权限表"""
    total = validate_policy()
    policy = describe_policy()
    if args.role:
        role = to_role(args.role)
        policy = {role.value: policy[role.value]}

    if args.format == 'json':
        print(json.dumps(policy, indent=2))
        return 0

    for role, grants in policy.items():
        print(f"{role}:")
        for grant in grants:
            condition = f"  when {grant['condition']}" if grant['condition'] else ''
            print(f"  {grant['action']:<10} {grant['subject']:<14}{condition}")
    print(f"✅ {total} grants")
    return 0


def check_permission(args):
    """检查权限，允许返回 0，拒绝返回 2"""
    attributes = {}
    for item in args.attr:
        key, sep, value = item.partition('=')
        if not sep:
            print(f"错误: 属性格式应为 KEY=VALUE: {item}", file=sys.stderr)
            return 1
        attributes[key] = value

    subject = subject_from(args.kind, attributes)
    decision = PermissionService(strict_actions=True).evaluate(
        args.user_id, args.role, args.action, subject
    )

    status = 'ALLOW' if decision.allowed else 'DENY'
    print(f"{status}: {decision.reason}")
    return 0 if decision.allowed else 2


if __name__ == '__main__':
    sys.exit(main())
