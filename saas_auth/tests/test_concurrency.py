"""
并发测试 - 决策是纯函数，并发调用结果必须和串行一致
"""

import random
from concurrent.futures import ThreadPoolExecutor

from django.test import SimpleTestCase

from ..constants import Role
from ..services import PermissionService
from ..subjects import describe
from .test_permission_service import sample_subjects


class ConcurrencyTest(SimpleTestCase):
    """并发测试"""

    def setUp(self):
        self.permission_service = PermissionService()
        self.users = [f"user-{i}" for i in range(5)]

        rng = random.Random(1234)
        subjects = sample_subjects(owner_id='user-0')
        self.cases = []
        for _ in range(2000):
            kind = rng.choice(list(subjects))
            action = rng.choice(sorted(describe(kind).valid_actions))
            self.cases.append((rng.choice(self.users), rng.choice(list(Role)), action, subjects[kind]))

    def test_concurrent_evaluation_matches_serial(self):
        """20个线程并发决策"""
        expected = [self.permission_service.can(*case) for case in self.cases]

        def evaluate(case):
            return self.permission_service.can(*case)

        with ThreadPoolExecutor(max_workers=20) as executor:
            results = list(executor.map(evaluate, self.cases))

        self.assertEqual(results, expected)
