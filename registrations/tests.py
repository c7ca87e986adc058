import json
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from .store import RegistrationStore, StorageError


class RegistrationStoreTestCase(SimpleTestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.directory = Path(tmp.name) / "registrations"
        overrides = override_settings(REGISTRATIONS_DIR=self.directory)
        overrides.enable()
        self.addCleanup(overrides.disable)


class RegistrationStoreTests(RegistrationStoreTestCase):
    def test_save_writes_record_and_master(self):
        with patch("registrations.store.time") as fake_time:
            fake_time.time.return_value = 1735689600.5
            record = RegistrationStore().save({"name": "Asha", "eventType": "Dance"})

        self.assertEqual(record["id"], "1735689600500")
        self.assertEqual(record["name"], "Asha")
        self.assertTrue(record["timestamp"].endswith("Z"))

        single = json.loads((self.directory / "registration_1735689600500.json").read_text(encoding="utf-8"))
        self.assertEqual(single, record)
        master = json.loads((self.directory / "all_registrations.json").read_text(encoding="utf-8"))
        self.assertEqual(master, [record])

    def test_saves_append_to_master(self):
        store = RegistrationStore()
        with patch("registrations.store.time") as fake_time:
            fake_time.time.side_effect = [1.0, 2.0]
            first = store.save({"name": "Asha"})
            second = store.save({"name": "Ravi"})

        self.assertEqual([r["id"] for r in store.all()], [first["id"], second["id"]])

    def test_generated_fields_override_submitted_ones(self):
        record = RegistrationStore().save({"name": "Asha", "id": "mine", "timestamp": "yesterday"})
        self.assertNotEqual(record["id"], "mine")
        self.assertNotEqual(record["timestamp"], "yesterday")

    def test_all_empty_when_nothing_saved(self):
        self.assertEqual(RegistrationStore().all(), [])

    def test_corrupt_master_raises_storage_error(self):
        self.directory.mkdir(parents=True)
        (self.directory / "all_registrations.json").write_text("{broken", encoding="utf-8")
        with self.assertRaises(StorageError):
            RegistrationStore().all()
        with self.assertRaises(StorageError):
            RegistrationStore().save({"name": "Asha"})
        self.assertEqual(sorted(p.name for p in self.directory.iterdir()), ["all_registrations.json"])

    def test_failed_master_write_keeps_previous_master(self):
        store = RegistrationStore()
        first = store.save({"name": "Asha"})
        real_replace = os.replace

        def replace(src, dst):
            if Path(dst).name == "all_registrations.json":
                raise OSError("No space left on device")
            real_replace(src, dst)

        with patch("registrations.store.os.replace", side_effect=replace):
            with self.assertRaises(StorageError):
                store.save({"name": "Ravi"})

        self.assertEqual(store.all(), [first])
        self.assertEqual(
            sorted(p.name for p in self.directory.iterdir()),
            ["all_registrations.json", f"registration_{first['id']}.json"],
        )

    def test_saves_in_same_millisecond_get_distinct_ids(self):
        store = RegistrationStore()
        with patch("registrations.store.time") as fake_time:
            fake_time.time.return_value = 5.0
            first = store.save({"name": "Asha"})
            second = store.save({"name": "Ravi"})

        self.assertEqual((first["id"], second["id"]), ("5000", "5001"))
        self.assertEqual(
            json.loads((self.directory / "registration_5000.json").read_text(encoding="utf-8"))["name"],
            "Asha",
        )
        self.assertEqual(len(store.all()), 2)


class RegistrationViewTests(RegistrationStoreTestCase):
    def test_saved_registration_is_listed(self):
        submitted = {
            "name": "Asha Verma",
            "email": "asha@example.com",
            "phone": "9876543210",
            "eventType": "solo",
            "members": 1,
        }
        with self.assertLogs("registrations.store", level="INFO") as cm:
            resp = self.client.post(
                reverse("registrations:save_registration"),
                data=json.dumps(submitted),
                content_type="application/json",
            )

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Registration saved successfully")
        self.assertIn("Registration saved: Asha Verma - solo", cm.output[0])

        resp = self.client.get(reverse("registrations:list_registrations"))
        self.assertEqual(resp.status_code, 200)
        registrations = resp.json()["registrations"]
        self.assertEqual(len(registrations), 1)
        stored = registrations[0]
        self.assertEqual(stored["id"], body["registrationId"])
        self.assertIn("timestamp", stored)
        self.assertEqual({k: v for k, v in stored.items() if k not in ("id", "timestamp")}, submitted)

    def test_list_empty(self):
        resp = self.client.get(reverse("registrations:list_registrations"))
        self.assertEqual(resp.json(), {"success": True, "registrations": []})

    def test_save_failure_answers_500(self):
        with patch("registrations.views.RegistrationStore.save", side_effect=StorageError("disk full")):
            with self.assertLogs("registrations.views", level="ERROR"):
                resp = self.client.post(
                    reverse("registrations:save_registration"),
                    data=json.dumps({"name": "Asha"}),
                    content_type="application/json",
                )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Failed to save registration data"})

    def test_read_failure_answers_500(self):
        self.directory.mkdir(parents=True)
        (self.directory / "all_registrations.json").write_text("not json", encoding="utf-8")
        with self.assertLogs("registrations.views", level="ERROR"):
            resp = self.client.get(reverse("registrations:list_registrations"))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Failed to read registrations"})

    def test_invalid_json_body(self):
        resp = self.client.post(
            reverse("registrations:save_registration"),
            data="[1, 2",
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 400)
