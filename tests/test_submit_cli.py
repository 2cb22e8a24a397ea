import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

import httpx

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from app.scripts.submit_application import main
from app.services.draft_store import InMemoryDraftStore

BASE_ARGS = [
    "--field", "nome=Ana Souza",
    "--field", "email=ana@example.com",
    "--field", "telefone=912 345 678",
    "--field", "experiencia=Dez anos como rececionista.",
    "--check-box", "termos",
    "--api-url", "https://api.test/api/candidatura",
]


class SubmitCliTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.photo = Path(self.tmp.name) / "ana.png"
        self.photo.write_bytes(b"\x89PNG\r\n\x1a\n")
        self.store = InMemoryDraftStore()
        self.store_patch = patch("app.scripts.submit_application.build_draft_store", return_value=self.store)
        self.store_patch.start()
        self.calls = []

    def tearDown(self):
        self.store_patch.stop()
        self.tmp.cleanup()

    def _run(self, args, response):
        def handler(request):
            self.calls.append(request)
            return response

        out = io.StringIO()
        with redirect_stdout(out):
            code = main(args, transport=httpx.MockTransport(handler))
        return code, out.getvalue()

    def test_successful_submission_exits_zero(self):
        args = BASE_ARGS + ["--field", "idade=29", "--photo", str(self.photo)]
        code, output = self._run(args, httpx.Response(201, json={"ok": True}))
        self.assertEqual(code, 0)
        self.assertIn("Candidatura enviada com sucesso", output)
        self.assertEqual(len(self.calls), 1)
        self.assertIn(b'filename="ana.png"', self.calls[0].content)
        self.assertEqual(self.store.keys(), [])

    def test_under_age_exits_non_zero_without_request(self):
        args = BASE_ARGS + ["--field", "idade=16", "--photo", str(self.photo)]
        code, output = self._run(args, httpx.Response(201))
        self.assertEqual(code, 1)
        self.assertIn("18 anos", output)
        self.assertEqual(self.calls, [])

    def test_rejected_submission_prints_detail(self):
        args = BASE_ARGS + ["--field", "idade=29", "--photo", str(self.photo)]
        code, output = self._run(args, httpx.Response(409, json={"detalhe": "Candidatura duplicada"}))
        self.assertEqual(code, 1)
        self.assertIn("❌ Erro ao enviar: Candidatura duplicada", output)
        self.assertEqual(self.store.get("galeria_secreta_form_nome"), "Ana Souza")

    def test_saved_drafts_fill_missing_values(self):
        self.store.set("galeria_secreta_form_idade", "33")
        args = BASE_ARGS + ["--photo", str(self.photo)]
        code, _ = self._run(args, httpx.Response(201, json={}))
        self.assertEqual(code, 0)
        self.assertIn(b'name="idade"\r\n\r\n33\r\n', self.calls[0].content)

    def test_malformed_field_argument(self):
        code, output = self._run(["--field", "nome"], httpx.Response(201))
        self.assertEqual(code, 2)
        self.assertIn("invalid input", output)

    def test_unknown_field_name(self):
        code, _ = self._run(["--field", "apelido=Souza"], httpx.Response(201))
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
