from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from propdocs.config import Settings


def test_required_document_types_default() -> None:
    assert Settings().required_document_types == ["ritning", "OVK", "brandskydd", "service"]


def test_required_document_types_from_comma_separated_env(monkeypatch) -> None:
    monkeypatch.setenv("REQUIRED_DOCUMENT_TYPES", " ritning, OVK ,energideklaration")
    assert Settings().required_document_types == ["ritning", "OVK", "energideklaration"]


def test_required_document_types_from_json_env(monkeypatch) -> None:
    monkeypatch.setenv("REQUIRED_DOCUMENT_TYPES", '["OVK", "service"]')
    assert Settings().required_document_types == ["OVK", "service"]


@pytest.mark.parametrize("value", ["", " , ", "OVK,service,OVK"])
def test_invalid_required_document_types(monkeypatch, value) -> None:
    monkeypatch.setenv("REQUIRED_DOCUMENT_TYPES", value)
    with pytest.raises(ValidationError):
        Settings()


def test_stale_window_must_be_positive(monkeypatch) -> None:
    monkeypatch.setenv("DOCUMENT_STALE_AFTER_YEARS", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_aws_settings_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("S3_BUCKET", "propdocs-prod")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    aws = Settings().aws
    assert aws.s3_bucket == "propdocs-prod"
    assert aws.region == "eu-west-1"


def test_engine_default_stale_window_follows_settings() -> None:
    from propdocs.services.classification import STALE_AFTER_YEARS

    assert STALE_AFTER_YEARS == Settings.model_fields["document_stale_after_years"].default


def test_env_files_do_not_override_existing_variables(tmp_path, monkeypatch) -> None:
    from propdocs.config import _load_env_files

    env_file = tmp_path / ".env"
    env_file.write_text('export PD_TEST_BUCKET="from-file"\nPD_TEST_REGION=eu-west-1\n# comment\n')
    monkeypatch.setenv("PD_TEST_REGION", "eu-north-1")
    monkeypatch.delenv("PD_TEST_BUCKET", raising=False)

    _load_env_files((env_file, tmp_path / "missing.env"))

    assert os.environ["PD_TEST_BUCKET"] == "from-file"
    assert os.environ["PD_TEST_REGION"] == "eu-north-1"
    monkeypatch.delenv("PD_TEST_BUCKET")
