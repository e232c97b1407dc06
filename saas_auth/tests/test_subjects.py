"""
测试资源注册表
"""

from types import SimpleNamespace

from django.test import SimpleTestCase

from ..constants import Action, SubjectKind
from ..exceptions import InvalidSubjectError, UnknownSubjectKind
from ..subjects import (
    BillingSubject,
    OrganizationSubject,
    ProjectSubject,
    UserSubject,
    describe,
    is_valid_action,
    kinds,
    subject_from,
)


class DescribeTest(SimpleTestCase):
    """测试资源类型描述"""

    def test_every_kind_is_registered(self):
        """所有声明的资源类型都在注册表中"""
        self.assertEqual(set(kinds()), set(SubjectKind))

    def test_describe_project(self):
        descriptor = describe(SubjectKind.PROJECT)

        self.assertEqual(descriptor.kind, SubjectKind.PROJECT)
        self.assertIs(descriptor.subject_class, ProjectSubject)
        self.assertEqual(descriptor.required_attributes, ('id', 'owner_id', 'organization_id'))
        self.assertEqual(
            descriptor.valid_actions,
            {Action.MANAGE, Action.GET, Action.CREATE, Action.UPDATE, Action.DELETE}
        )

    def test_describe_accepts_string(self):
        self.assertEqual(describe('Organization').kind, SubjectKind.ORGANIZATION)

    def test_user_actions(self):
        """User 只支持 manage/get/create/delete"""
        descriptor = describe('User')
        self.assertEqual(
            descriptor.valid_actions,
            {Action.MANAGE, Action.GET, Action.CREATE, Action.DELETE}
        )

    def test_manage_valid_for_every_kind(self):
        for kind in SubjectKind:
            self.assertIn(Action.MANAGE, describe(kind).valid_actions)

    def test_describe_unknown_kind(self):
        with self.assertRaises(UnknownSubjectKind) as ctx:
            describe('Spaceship')
        self.assertEqual(ctx.exception.kind, 'Spaceship')
        self.assertEqual(ctx.exception.error_code, 'unknown_subject_kind')

    def test_is_valid_action(self):
        self.assertTrue(is_valid_action('Organization', 'transfer'))
        self.assertFalse(is_valid_action('Project', 'transfer'))
        self.assertFalse(is_valid_action('Billing', 'delete'))
        self.assertFalse(is_valid_action('Project', 'fly'))

    def test_is_valid_action_unknown_kind(self):
        with self.assertRaises(UnknownSubjectKind):
            is_valid_action('Spaceship', 'get')


class SubjectFromTest(SimpleTestCase):
    """测试从领域记录构造资源对象"""

    def test_from_dict(self):
        subject = subject_from('Project', {
            'id': 'p1',
            'owner_id': 'u1',
            'organization_id': 'o1',
            'name': 'ignored',
        })
        self.assertEqual(subject, ProjectSubject(id='p1', owner_id='u1', organization_id='o1'))
        self.assertEqual(subject.kind, SubjectKind.PROJECT)

    def test_from_camel_case_dict(self):
        """支持 ownerId 风格的键名"""
        subject = subject_from('Organization', {'id': 'o1', 'ownerId': 'u1', 'slug': 'acme'})
        self.assertEqual(subject, OrganizationSubject(id='o1', owner_id='u1'))

    def test_none_key_falls_back_to_camel_case(self):
        """字典和对象一样：snake_case 键为 None 时读取 camelCase 键"""
        record = {'id': 'o1', 'owner_id': None, 'ownerId': 'u1'}
        self.assertEqual(subject_from('Organization', record), OrganizationSubject(id='o1', owner_id='u1'))
        self.assertEqual(
            subject_from('Organization', SimpleNamespace(**record)),
            OrganizationSubject(id='o1', owner_id='u1')
        )

    def test_from_object(self):
        """支持模型实例风格的对象"""
        record = SimpleNamespace(id=7, owner_id=3, organization_id=9, name='Demo')
        subject = subject_from(SubjectKind.PROJECT, record)
        self.assertEqual(subject, ProjectSubject(id='7', owner_id='3', organization_id='9'))

    def test_ids_are_strings(self):
        subject = subject_from('User', {'id': 42})
        self.assertEqual(subject.id, '42')

    def test_missing_attribute(self):
        with self.assertRaises(InvalidSubjectError) as ctx:
            subject_from('Project', {'id': 'p1'})
        self.assertIn('owner_id', ctx.exception.message)
        self.assertIn('organization_id', ctx.exception.message)

    def test_none_attribute_is_missing(self):
        with self.assertRaises(InvalidSubjectError):
            subject_from('Billing', {'organization_id': None})

    def test_existing_subject_passthrough(self):
        subject = UserSubject(id='u1')
        self.assertIs(subject_from('User', subject), subject)

    def test_subject_of_other_kind(self):
        with self.assertRaises(InvalidSubjectError):
            subject_from('Project', BillingSubject(organization_id='o1'))

    def test_unknown_kind(self):
        with self.assertRaises(UnknownSubjectKind):
            subject_from('Spaceship', {'id': 'x'})

    def test_subjects_are_immutable(self):
        subject = OrganizationSubject(id='o1', owner_id='u1')
        with self.assertRaises(AttributeError):
            subject.owner_id = 'u2'
