"""Unit tests for InMemoryUserRepository — verifies Port contract compliance."""

import threading
import unittest

from adapter.memory.user_repository import InMemoryUserRepository
from domain.model.errors import ConflictError
from domain.model.user import User


class TestInMemoryUserRepository(unittest.TestCase):
    """Tests that InMemoryUserRepository correctly implements UserRepository Protocol."""

    def setUp(self):
        self.repo = InMemoryUserRepository()

    def _create(self, email='ann@example.com', **kwargs):
        return self.repo.create(
            email=email,
            password_hash=kwargs.get('password_hash', '$2b$04$hash'),
            first_name=kwargs.get('first_name', 'Ann'),
            last_name=kwargs.get('last_name', ''),
        )

    # ── create ────────────────────────────────────────────────

    def test_create_returns_active_user(self):
        user = self._create(last_name='Lee')

        self.assertIsInstance(user, User)
        self.assertEqual(len(user.id), 32)
        self.assertEqual(user.first_name, 'Ann')
        self.assertEqual(user.last_name, 'Lee')
        self.assertTrue(user.is_active)
        self.assertIsNone(user.last_login)
        self.assertEqual(user.created_at, user.updated_at)

    def test_create_stores_email_lower_cased(self):
        user = self._create(email='Ann@Example.COM')
        self.assertEqual(user.email, 'ann@example.com')

    def test_create_rejects_duplicate_email_any_case(self):
        self._create(email='ann@example.com')

        with self.assertRaises(ConflictError):
            self._create(email='ANN@example.com')
        self.assertEqual(len(self.repo.store), 1)

    def test_concurrent_creates_with_same_email_store_one_user(self):
        results = []

        def worker():
            try:
                results.append(self._create(email='race@example.com'))
            except ConflictError:
                results.append(None)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(self.repo.store), 1)
        self.assertEqual(sum(1 for r in results if r is not None), 1)

    # ── reads ─────────────────────────────────────────────────

    def test_get_by_email_is_case_insensitive(self):
        created = self._create(email='ann@example.com')
        found = self.repo.get_by_email('  ANN@EXAMPLE.com ')
        self.assertEqual(found.id, created.id)

    def test_get_by_email_returns_none_for_missing(self):
        self.assertIsNone(self.repo.get_by_email('nobody@example.com'))

    def test_get_by_id_returns_none_for_missing(self):
        self.assertIsNone(self.repo.get_by_id('nonexistent'))

    def test_returned_users_are_copies(self):
        created = self._create()
        created.first_name = 'Mallory'
        self.assertEqual(self.repo.get_by_id(created.id).first_name, 'Ann')

    # ── update ────────────────────────────────────────────────

    def test_update_sets_fields_and_advances_updated_at(self):
        created = self._create()
        updated = self.repo.update(created.id, first_name='Anna', last_name='')

        self.assertEqual(updated.first_name, 'Anna')
        self.assertEqual(updated.last_name, '')
        self.assertGreater(updated.updated_at, created.updated_at)
        self.assertEqual(updated.created_at, created.created_at)

    def test_update_without_fields_still_advances_updated_at(self):
        created = self._create()
        updated = self.repo.update(created.id)
        self.assertGreater(updated.updated_at, created.updated_at)

    def test_update_rejects_immutable_fields(self):
        created = self._create()
        with self.assertRaises(ValueError):
            self.repo.update(created.id, email='other@example.com')
        with self.assertRaises(ValueError):
            self.repo.update(created.id, id='other')

    def test_update_returns_none_for_missing(self):
        self.assertIsNone(self.repo.update('nonexistent', first_name='X'))

    # ── update_last_login ─────────────────────────────────────

    def test_update_last_login(self):
        created = self._create()
        self.assertTrue(self.repo.update_last_login(created.id))

        user = self.repo.get_by_id(created.id)
        self.assertIsNotNone(user.last_login)
        self.assertEqual(user.last_login, user.updated_at)
        self.assertGreater(user.updated_at, created.updated_at)

    def test_update_last_login_returns_false_for_missing(self):
        self.assertFalse(self.repo.update_last_login('nonexistent'))


if __name__ == '__main__':
    unittest.main()
