"""Tests for the CSV job store and the YAML user directory."""
import csv

import pytest

from jobscraper.errors import StorageError
from jobscraper.models import Source
from jobscraper.storage import HEADERS, JobStore, UserDirectory


def test_store_creates_file_with_header(tmp_path):
    store = JobStore(tmp_path / "data" / "jobs.csv")
    assert store.all_jobs() == []
    with open(store.path, newline="", encoding="utf-8") as f:
        assert next(csv.reader(f)) == HEADERS


def test_insert_and_find(tmp_path, make_job):
    store = JobStore(tmp_path / "jobs.csv")
    row = store.insert_job("dana", make_job("Product Manager", "Acme Ltd.", Source.LINKEDIN, match_score=85))

    assert len(row["id"]) == 32
    found = store.find_job("dana", "product manager", "ACME LTD")
    assert found["title"] == "Product Manager"
    assert found["source"] == "LinkedIn"
    assert found["match_score"] == "85"
    assert found["linkedin_enhanced"] == ""
    assert store.find_job("avi", "Product Manager", "Acme Ltd.") is None


def test_hebrew_text_survives(tmp_path, make_job):
    store = JobStore(tmp_path / "jobs.csv")
    store.insert_job("dana", make_job("מנהל מוצר", "Acme", location="תל אביב"))
    [row] = store.jobs_for_user("dana")
    assert row["title"] == "מנהל מוצר"
    assert row["location"] == "תל אביב"


def test_jobs_for_user(tmp_path, make_job):
    store = JobStore(tmp_path / "jobs.csv")
    store.insert_job("dana", make_job("A", "X"))
    store.insert_job("avi", make_job("B", "X"))
    assert [r["title"] for r in store.jobs_for_user("dana")] == ["A"]
    assert len(store.all_jobs()) == 2


USERS_YAML = """
users:
  - id: dana
    user_name: Dana
    email: dana@example.com
    preferences:
      keywords: [product manager]
      remoteWork: true
      job_types: [full-time]
  - id: avi
    email: avi@example.com
  - id: broken
"""


def test_user_directory(tmp_path):
    path = tmp_path / "users.yaml"
    path.write_text(USERS_YAML, encoding="utf-8")
    directory = UserDirectory(path)

    users = directory.list_users()

    assert [u.id for u in users] == ["dana", "avi"]
    dana = directory.get_user("dana")
    assert dana.preferences.keywords == ("product manager",)
    assert dana.preferences.remote_work is True
    assert dana.preferences.job_types == ("full-time",)
    avi = directory.get_user("avi")
    assert avi.user_name == "avi"
    assert avi.preferences is None
    assert directory.get_user("ghost") is None


def test_missing_user_directory(tmp_path):
    with pytest.raises(StorageError):
        UserDirectory(tmp_path / "nope.yaml").list_users()


def test_invalid_user_yaml(tmp_path):
    path = tmp_path / "users.yaml"
    path.write_text("users: [unclosed", encoding="utf-8")
    with pytest.raises(StorageError):
        UserDirectory(path).list_users()
