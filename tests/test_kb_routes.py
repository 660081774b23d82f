"""Tests for the knowledge base HTTP routes.

These run the FastAPI app in-process through `TestClient` (no server required).
"""

from __future__ import annotations

import json
import time
import unittest
from pathlib import Path
import sys


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from fastapi.testclient import TestClient  # noqa: E402

from docx_fixtures import TROUBLESHOOTING_DOC, build_docx  # noqa: E402

from service_bot.config_manager import Config  # noqa: E402
from service_bot.knowledge_base.seed import DEFAULT_RESPONSE, GREETING  # noqa: E402
from service_bot.server import create_app  # noqa: E402

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TestKnowledgeBaseRoutes(unittest.TestCase):
    """Tests for the `/kb` endpoints."""

    def setUp(self) -> None:
        self.app = create_app()
        self.client = TestClient(self.app)

    def _stats(self) -> dict:
        return self.client.get("/kb/stats").json()["data"]

    def test_search_match(self) -> None:
        response = self.client.post("/kb/search", json={"query": "warranty policy"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["match"]["id"], "warranty-1")
        self.assertEqual(data["match"]["provenance"], "seeded")
        self.assertEqual(data["reply"], data["match"]["answer"])

    def test_search_without_match(self) -> None:
        data = self.client.post("/kb/search", json={"query": "   "}).json()["data"]
        self.assertIsNone(data["match"])
        self.assertEqual(data["reply"], DEFAULT_RESPONSE)

    def test_chat(self) -> None:
        data = self.client.post(
            "/kb/chat", json={"message": "How do I contact support?"}
        ).json()["data"]
        self.assertEqual(data["matched_id"], "contact-1")
        self.assertIn("support@example.com", data["reply"])

    def test_greeting(self) -> None:
        data = self.client.get("/kb/greeting").json()["data"]
        self.assertEqual(data["message"], GREETING)

    def test_import_json(self) -> None:
        payload = [
            {"question": "Q one?", "answer": "A one", "keywords": ["one"]},
            {"question": "Q two?", "answer": "A two", "keywords": ["two"]},
        ]
        response = self.client.post(
            "/kb/import",
            files={"file": ("kb.json", json.dumps(payload).encode(), "application/json")},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["entries_added"], 2)
        self.assertEqual(self._stats(), {"total": 7, "imported": 2, "default": 5})

    def test_import_invalid_json(self) -> None:
        response = self.client.post(
            "/kb/import",
            files={"file": ("kb.json", b'{"not": "an array"}', "application/json")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self._stats()["imported"], 0)

    def test_import_json_body(self) -> None:
        response = self.client.post(
            "/kb/import", json=[{"question": "Q?", "answer": "A", "keywords": []}]
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["entries_added"], 1)
        self.assertEqual(self._stats()["imported"], 1)

    def test_import_invalid_json_body(self) -> None:
        response = self.client.post("/kb/import", json={"not": "an array"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self._stats()["imported"], 0)

    def test_import_empty_body(self) -> None:
        response = self.client.post("/kb/import")
        self.assertEqual(response.status_code, 400)

    def test_import_empty_file(self) -> None:
        response = self.client.post(
            "/kb/import", files={"file": ("kb.json", b"", "application/json")}
        )
        self.assertEqual(response.status_code, 400)

    def test_upload_too_large(self) -> None:
        config = Config(knowledge_base={"max_upload_bytes": 10})
        client = TestClient(create_app(config))
        response = client.post(
            "/kb/import", files={"file": ("kb.json", b"[" + b" " * 20 + b"]", "application/json")}
        )
        self.assertEqual(response.status_code, 413)

    def test_upload_docx_blocking(self) -> None:
        response = self.client.post(
            "/kb/upload?background=false",
            files={"file": ("manual.docx", build_docx(TROUBLESHOOTING_DOC), DOCX_MIME)},
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["status"], "completed")
        self.assertEqual(data["entries_added"], 2)
        self.assertEqual(self._stats()["imported"], 2)

    def test_upload_docx_background(self) -> None:
        with TestClient(self.app) as client:
            response = client.post(
                "/kb/upload",
                files={"file": ("manual.docx", build_docx(TROUBLESHOOTING_DOC), DOCX_MIME)},
            )
            self.assertEqual(response.status_code, 200)
            task_id = response.json()["data"]["task_id"]

            status = None
            deadline = time.monotonic() + 10
            while time.monotonic() < deadline:
                status = client.get(f"/kb/tasks/{task_id}").json()["data"]
                if status["status"] not in ("queued", "processing"):
                    break
                time.sleep(0.05)

        self.assertEqual(status["status"], "completed")
        self.assertEqual(status["entries_added"], 2)

    def test_upload_unsupported_format(self) -> None:
        response = self.client.post(
            "/kb/upload", files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        self.assertEqual(response.status_code, 400)

    def test_upload_corrupt_docx(self) -> None:
        response = self.client.post(
            "/kb/upload?background=false",
            files={"file": ("broken.docx", b"garbage", DOCX_MIME)},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self._stats()["imported"], 0)

    def test_convert_previews_without_importing(self) -> None:
        response = self.client.post(
            "/kb/convert",
            files={"file": ("manual.docx", build_docx(TROUBLESHOOTING_DOC), DOCX_MIME)},
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["count"], 2)
        self.assertEqual(data["entries"][0]["category"], "Troubleshooting")
        self.assertEqual(self._stats()["imported"], 0)

    def test_unknown_task(self) -> None:
        self.assertEqual(self.client.get("/kb/tasks/missing").status_code, 404)

    def test_export_and_reimport(self) -> None:
        response = self.client.get("/kb/export")

        self.assertEqual(response.status_code, 200)
        self.assertIn("knowledge-base.json", response.headers["content-disposition"])
        exported = response.json()
        self.assertEqual(len(exported), 5)

        self.client.post(
            "/kb/import",
            files={"file": ("kb.json", json.dumps(exported).encode(), "application/json")},
        )
        self.assertEqual(self._stats(), {"total": 10, "imported": 5, "default": 5})

    def test_reset(self) -> None:
        self.client.post(
            "/kb/upload?background=false",
            files={"file": ("manual.docx", build_docx(TROUBLESHOOTING_DOC), DOCX_MIME)},
        )

        response = self.client.post("/kb/reset")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["data"], {"total": 5, "imported": 0, "default": 5}
        )


if __name__ == "__main__":
    unittest.main()
