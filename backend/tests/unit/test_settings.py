import pytest

from familyhub import settings as settings_module
from familyhub.settings import Settings, roles_for


def test_role_lists_accept_csv_and_json(monkeypatch):
    monkeypatch.setenv("CONTRIBUTION_WRITE_ROLES", "admin, treasurer")
    monkeypatch.setenv("EVENT_WRITE_ROLES", '["super_admin"]')

    configured = Settings()

    assert configured.contribution_write_roles == ("admin", "treasurer")
    assert configured.event_write_roles == ("super_admin",)


def test_roles_for_reads_live_settings(monkeypatch):
    monkeypatch.setattr(settings_module.settings, "audit_read_roles", ("auditor",))
    assert roles_for("audit_read") == ("auditor",)
    with pytest.raises(KeyError):
        roles_for("nonexistent")


def test_error_details_only_in_development():
    configured = Settings()
    configured.environment = "production"
    assert configured.show_error_details() is False
    configured.environment = "development"
    assert configured.show_error_details() is True


def test_family_roles_default_to_any_writer_and_admin_deletes(monkeypatch):
    monkeypatch.setenv("FAMILY_PHOTO_TYPES", "image/png,image/jpeg")

    configured = Settings()

    assert configured.family_write_roles == ()
    assert configured.family_delete_roles == ("admin", "super_admin")
    assert configured.project_write_roles == ("admin", "manager", "super_admin")
    assert configured.family_photo_types == ("image/png", "image/jpeg")
