"""Tests for MongoUserRepository against a mocked collection."""

import unittest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import ConflictError


def _user_doc(**overrides):
    now = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)
    doc = {
        '_id': 'user-1',
        'email': 'ann@example.com',
        'password_hash': '$2b$12$hashed',
        'first_name': 'Ann',
        'last_name': '',
        'is_active': True,
        'created_at': now,
        'updated_at': now,
        'last_login': None,
    }
    doc.update(overrides)
    return doc


class MongoUserRepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestCreate(MongoUserRepositoryTestCase):

    @patch('adapter.mongodb.user_repository.uuid')
    def test_create_inserts_lower_cased_document(self, mock_uuid):
        mock_uuid.uuid4.return_value.hex = 'new-user-id'

        user = self.repo.create(
            email='Ann@Example.com',
            password_hash='$2b$12$hashed',
            first_name='Ann',
            last_name='Lee',
        )

        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)
        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], 'new-user-id')
        self.assertEqual(doc['email'], 'ann@example.com')
        self.assertTrue(doc['is_active'])
        self.assertIsNone(doc['last_login'])
        self.assertEqual(user.id, 'new-user-id')
        self.assertEqual(user.last_name, 'Lee')

    def test_create_duplicate_raises_conflict(self):
        self.collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key error')

        with self.assertRaises(ConflictError):
            self.repo.create(email='ann@example.com', password_hash='h', first_name='Ann')

    def test_create_returns_none_on_database_error(self):
        self.collection.insert_one.side_effect = PyMongoError('connection reset')

        self.assertIsNone(
            self.repo.create(email='ann@example.com', password_hash='h', first_name='Ann')
        )


class TestReads(MongoUserRepositoryTestCase):

    def test_get_by_email_queries_lower_cased(self):
        self.collection.find_one.return_value = _user_doc()

        user = self.repo.get_by_email('ANN@example.com')

        self.collection.find_one.assert_called_once_with({'email': 'ann@example.com'})
        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.password_hash, '$2b$12$hashed')

    def test_get_by_email_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_email('nobody@example.com'))

    def test_get_by_id_defaults_missing_optional_fields(self):
        doc = _user_doc()
        del doc['last_name']
        del doc['is_active']
        self.collection.find_one.return_value = doc

        user = self.repo.get_by_id('user-1')

        self.collection.find_one.assert_called_once_with({'_id': 'user-1'})
        self.assertEqual(user.last_name, '')
        self.assertTrue(user.is_active)

    def test_get_by_id_returns_none_on_database_error(self):
        self.collection.find_one.side_effect = PyMongoError('boom')
        self.assertIsNone(self.repo.get_by_id('user-1'))


class TestUpdates(MongoUserRepositoryTestCase):

    def test_update_sets_fields_and_updated_at(self):
        self.collection.find_one_and_update.return_value = _user_doc(first_name='Anna')

        user = self.repo.update('user-1', first_name='Anna')

        args, kwargs = self.collection.find_one_and_update.call_args
        self.assertEqual(args[0], {'_id': 'user-1'})
        self.assertEqual(args[1]['$set']['first_name'], 'Anna')
        self.assertIn('updated_at', args[1]['$set'])
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)
        self.assertEqual(user.first_name, 'Anna')

    def test_update_missing_user_returns_none(self):
        self.collection.find_one_and_update.return_value = None
        self.assertIsNone(self.repo.update('ghost', first_name='X'))

    def test_update_rejects_unknown_fields(self):
        with self.assertRaises(ValueError):
            self.repo.update('user-1', email='x@example.com')
        self.collection.find_one_and_update.assert_not_called()

    def test_update_propagates_database_error(self):
        self.collection.find_one_and_update.side_effect = PyMongoError('boom')
        with self.assertRaises(PyMongoError):
            self.repo.update('user-1', first_name='X')

    def test_update_last_login(self):
        self.collection.update_one.return_value.modified_count = 1

        self.assertTrue(self.repo.update_last_login('user-1'))

        update = self.collection.update_one.call_args[0][1]['$set']
        self.assertEqual(update['last_login'], update['updated_at'])

    def test_update_last_login_missing_user(self):
        self.collection.update_one.return_value.modified_count = 0
        self.assertFalse(self.repo.update_last_login('ghost'))


class TestEnsureIndexes(MongoUserRepositoryTestCase):

    def test_creates_unique_email_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        self.collection.create_index.assert_any_call(
            [('email', 1)], name='idx_users_email', unique=True
        )
        self.collection.create_index.assert_any_call(
            [('created_at', -1)], name='idx_users_created_at'
        )

    def test_returns_false_on_unrecoverable_error(self):
        self.collection.create_index.side_effect = PyMongoError('not authorized')
        self.assertFalse(self.repo.ensure_indexes())


if __name__ == '__main__':
    unittest.main()
