import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

import unittest

from fastapi.testclient import TestClient

from database import SessionLocal, init_db
from main import app
from models.note import ExpertNote


class NotesRoutesTests(unittest.TestCase):
    def setUp(self):
        init_db()
        self.client = TestClient(app)

    def tearDown(self):
        db = SessionLocal()
        try:
            db.query(ExpertNote).delete()
            db.commit()
        finally:
            db.close()

    def _create(self, **overrides):
        body = {"symbol": " reliance ", "market": "nse", "person": "Analyst A", "opinion": "Accumulate on dips"}
        body.update(overrides)
        return self.client.post("/api/notes", json=body)

    def test_create_normalizes_symbol_and_market(self):
        resp = self._create()
        self.assertEqual(resp.status_code, 201)
        note = resp.json()
        self.assertEqual(note["symbol"], "RELIANCE")
        self.assertEqual(note["market"], "NSE")
        self.assertEqual(note["person"], "Analyst A")
        self.assertTrue(note["id"])
        self.assertIn("timestamp", note)

    def test_list_filters_by_symbol_and_market(self):
        self._create()
        self._create(market="bse")
        self._create(symbol="tcs")

        resp = self.client.get("/api/notes", params={"symbol": "reliance", "market": "NSE"})
        self.assertEqual(resp.status_code, 200)
        notes = resp.json()
        self.assertEqual(len(notes), 1)
        self.assertEqual(notes[0]["market"], "NSE")

    def test_list_without_market_matches_notes_without_market(self):
        self._create(market="")
        self._create()
        notes = self.client.get("/api/notes", params={"symbol": "RELIANCE"}).json()
        self.assertEqual(len(notes), 1)
        self.assertEqual(notes[0]["market"], "")

    def test_create_rejects_blank_person_or_opinion(self):
        self.assertEqual(self._create(person="   ").status_code, 422)
        self.assertEqual(self._create(opinion="").status_code, 422)
        self.assertEqual(self._create(symbol=" ").status_code, 422)

    def test_non_string_market_is_422(self):
        resp = self._create(market=5)
        self.assertEqual(resp.status_code, 422)

    def test_null_market_is_stored_as_empty(self):
        resp = self._create(market=None)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["market"], "")

    def test_timestamp_is_utc_iso8601(self):
        created = self._create().json()
        self.assertTrue(created["timestamp"].endswith("+00:00"))
        listed = self.client.get("/api/notes", params={"symbol": "RELIANCE", "market": "NSE"}).json()
        self.assertTrue(listed[0]["timestamp"].endswith("+00:00"))

    def test_delete_then_list(self):
        note_id = self._create().json()["id"]
        resp = self.client.delete(f"/api/notes/{note_id}")
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(resp.content, b"")
        notes = self.client.get("/api/notes", params={"symbol": "RELIANCE", "market": "NSE"}).json()
        self.assertEqual(notes, [])

    def test_delete_unknown_note_is_404_with_message(self):
        resp = self.client.delete("/api/notes/does-not-exist")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "Note not found"})


if __name__ == "__main__":
    unittest.main()
