"""
测试管理命令和 CLI
"""

import json
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from ..cli import main


class ShowAuthPolicyCommandTest(SimpleTestCase):
    """测试 show_auth_policy 命令"""

    def test_table_output(self):
        out = StringIO()
        call_command('show_auth_policy', stdout=out)

        output = out.getvalue()
        self.assertIn('OWNER:', output)
        self.assertIn('when owner_id == user_id', output)
        self.assertIn('Policy OK', output)

    def test_json_for_one_role(self):
        out = StringIO()
        call_command('show_auth_policy', '--role', 'billing', '--json', stdout=out)

        policy = json.loads(out.getvalue())
        self.assertEqual(list(policy), ['BILLING'])
        self.assertIn(
            {'role': 'BILLING', 'action': 'manage', 'subject': 'Billing', 'condition': None},
            policy['BILLING']
        )

    def test_unknown_role(self):
        with self.assertRaises(CommandError):
            call_command('show_auth_policy', '--role', 'GUEST', stdout=StringIO())


class CliTest(SimpleTestCase):
    """测试 saas-auth 命令行工具"""

    def test_policy_json(self):
        out = StringIO()
        with redirect_stdout(out):
            code = main(['policy', '--format', 'json', '--role', 'MEMBER'])

        self.assertEqual(code, 0)
        self.assertEqual(list(json.loads(out.getvalue())), ['MEMBER'])

    def test_check_allow(self):
        out = StringIO()
        with redirect_stdout(out):
            code = main([
                'check', '--user-id', 'u1', '--role', 'MEMBER', '--action', 'update',
                '--kind', 'Project', '--attr', 'id=p1', '--attr', 'owner_id=u1',
                '--attr', 'organization_id=o1',
            ])

        self.assertEqual(code, 0)
        self.assertTrue(out.getvalue().startswith('ALLOW'))

    def test_check_deny(self):
        out = StringIO()
        with redirect_stdout(out):
            code = main([
                'check', '--user-id', 'u2', '--role', 'MEMBER', '--action', 'transfer',
                '--kind', 'Organization', '--attr', 'id=o1', '--attr', 'owner_id=u1',
            ])

        self.assertEqual(code, 2)
        self.assertTrue(out.getvalue().startswith('DENY'))

    def test_check_invalid_action(self):
        err = StringIO()
        with redirect_stderr(err):
            code = main([
                'check', '--user-id', 'u1', '--role', 'OWNER', '--action', 'transfer',
                '--kind', 'Project', '--attr', 'id=p1', '--attr', 'owner_id=u1',
                '--attr', 'organization_id=o1',
            ])

        self.assertEqual(code, 1)
        self.assertIn('not valid for subject kind', err.getvalue())
