"""Tests for role-gated book handlers: visibility per role, creation and status transitions."""

import unittest
from datetime import UTC, datetime

from bookcircle.core.errors import ForbiddenError, NotFoundError
from bookcircle.models import Account, Book
from bookcircle.schemas.auth import CurrentAccount
from bookcircle.services.books import check_transition, list_books, transition_book
from helpers import ApiClient, make_sessionmaker


def _caller(account_id: int, role: str) -> CurrentAccount:
    return CurrentAccount(
        id=account_id,
        username=f"user{account_id}",
        role=role,
        token_jti="jti",
        token_expires_at=datetime(2030, 1, 1, tzinfo=UTC),
    )


class TestVisibility(unittest.TestCase):
    """Writers see their own drafts; admins see every published book; all see finished."""

    def setUp(self) -> None:
        self.session = make_sessionmaker()()
        for i, role in ((1, "writer"), (2, "writer"), (3, "admin"), (4, "reader")):
            self.session.add(
                Account(id=i, username=f"user{i}", name=f"User {i}", password_hash="x", role=role)
            )
        self.session.add_all(
            [
                Book(id=1, title="W1 draft", status="draft", author_id=1),
                Book(id=2, title="W1 published", status="published", author_id=1),
                Book(id=3, title="W2 draft", status="draft", author_id=2),
                Book(id=4, title="W2 published", status="published", author_id=2),
                Book(id=5, title="W2 finished", status="finished", author_id=2),
            ]
        )
        self.session.commit()

    def tearDown(self) -> None:
        self.session.close()

    def ids(self, scope: str, caller: CurrentAccount) -> list[int]:
        return [b.id for b in list_books(self.session, scope, caller)]

    def test_writer_sees_only_own_drafts(self) -> None:
        self.assertEqual(self.ids("draft", _caller(1, "writer")), [1])

    def test_writer_sees_only_own_published(self) -> None:
        self.assertEqual(self.ids("published", _caller(1, "writer")), [2])

    def test_admin_sees_all_published(self) -> None:
        self.assertEqual(self.ids("published", _caller(3, "admin")), [2, 4])

    def test_admin_does_not_see_others_drafts(self) -> None:
        self.assertEqual(self.ids("draft", _caller(3, "admin")), [])

    def test_everyone_sees_finished(self) -> None:
        for caller in (_caller(1, "writer"), _caller(3, "admin"), _caller(4, "reader")):
            with self.subTest(role=caller.role):
                self.assertEqual(self.ids("finished", caller), [5])

    def test_all_scope(self) -> None:
        self.assertEqual(self.ids("all", _caller(3, "admin")), [1, 2, 3, 4, 5])
        self.assertEqual(self.ids("all", _caller(1, "writer")), [1, 2, 5])
        self.assertEqual(self.ids("all", _caller(4, "reader")), [5])

    def test_transition_unknown_book(self) -> None:
        with self.assertRaises(NotFoundError):
            transition_book(self.session, 999, "published", _caller(1, "writer"))

    def test_author_publishes_own_draft(self) -> None:
        book = transition_book(self.session, 1, "published", _caller(1, "writer"))
        self.assertEqual(book.status, "published")


class TestTransitionRules(unittest.TestCase):
    def _book(self, status: str, author_id: int = 1) -> Book:
        return Book(id=1, title="t", status=status, author_id=author_id)

    def test_only_admin_finishes(self) -> None:
        with self.assertRaises(ForbiddenError):
            check_transition(self._book("published"), "finished", _caller(1, "writer"))
        check_transition(self._book("published"), "finished", _caller(3, "admin"))

    def test_writer_cannot_touch_other_authors_book(self) -> None:
        with self.assertRaises(ForbiddenError):
            check_transition(self._book("draft", author_id=2), "published", _caller(1, "writer"))

    def test_writer_cannot_reopen_finished_book(self) -> None:
        with self.assertRaises(ForbiddenError):
            check_transition(self._book("finished"), "draft", _caller(1, "writer"))

    def test_writer_unpublishes_own_book(self) -> None:
        check_transition(self._book("published"), "draft", _caller(1, "writer"))


class TestBooksApi(unittest.TestCase):
    def setUp(self) -> None:
        self.api = ApiClient()
        self.client = self.api.client

    def tearDown(self) -> None:
        self.api.close()

    def test_reader_cannot_create_books(self) -> None:
        token = self.api.token_for("alice")
        resp = self.client.post("/api/books", json={"title": "Mine"}, headers=self.api.bearer(token))
        self.assertEqual(resp.status_code, 403)

    def test_writer_creates_and_lists_draft(self) -> None:
        token = self.api.token_for("wendy", role="writer")
        created = self.client.post(
            "/api/books", json={"title": "First", "genre": "fantasy"}, headers=self.api.bearer(token)
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["status"], "draft")

        listed = self.client.get("/api/books/read/draft", headers=self.api.bearer(token))
        self.assertEqual(listed.status_code, 200)
        self.assertEqual([b["title"] for b in listed.json()["books"]], ["First"])

    def test_admin_only_finish_rejects_writer_token(self) -> None:
        writer = self.api.token_for("wendy", role="writer")
        book_id = self.client.post(
            "/api/books", json={"title": "Saga", "status": "published"}, headers=self.api.bearer(writer)
        ).json()["id"]

        resp = self.client.patch(
            f"/api/books/{book_id}/status", json={"status": "finished"}, headers=self.api.bearer(writer)
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "forbidden")

        admin = self.api.token_for("root", role="admin")
        resp = self.client.patch(
            f"/api/books/{book_id}/status", json={"status": "finished"}, headers=self.api.bearer(admin)
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "finished")

    def test_listing_requires_token(self) -> None:
        self.assertEqual(self.client.get("/api/books/read/finished").status_code, 401)

    def test_unknown_scope_is_422(self) -> None:
        token = self.api.token_for("alice")
        resp = self.client.get("/api/books/read/archived", headers=self.api.bearer(token))
        self.assertEqual(resp.status_code, 422)


if __name__ == "__main__":
    unittest.main()
