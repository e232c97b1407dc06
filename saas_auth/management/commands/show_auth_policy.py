"""
打印 SaaS Auth 权限表
"""

import json

from django.core.management.base import BaseCommand, CommandError

from ...exceptions import SaasAuthError
from ...policy import describe_policy, to_role, validate_policy


class Command(BaseCommand):
    help = 'Show and validate the SaaS Auth role policy table'

    def add_arguments(self, parser):
        parser.add_argument('--role', help='Only show grants for this role')
        parser.add_argument('--json', action='store_true', help='Output JSON')

    def handle(self, *args, **options):
        """执行权限表检查"""
        try:
            total = validate_policy()
            policy = describe_policy()
            if options['role']:
                role = to_role(options['role'])
                policy = {role.value: policy[role.value]}
        except SaasAuthError as e:
            raise CommandError(f"Policy check failed: {e.message}")

        if options['json']:
            self.stdout.write(json.dumps(policy, indent=2))
            return

        for role, grants in policy.items():
            self.stdout.write(f"\n{role}:")
            for grant in grants:
                condition = f"  when {grant['condition']}" if grant['condition'] else ''
                self.stdout.write(f"  {grant['action']:<10} {grant['subject']:<14}{condition}")

        self.stdout.write(self.style.SUCCESS(f"\nPolicy OK: {total} grants"))
