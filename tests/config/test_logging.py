"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from profilectl.config.logging import configure_logging, mask_email
from profilectl.domain.fields import FieldRegistry
from profilectl.domain.user import ProfileUpdate
from profilectl.infrastructure.store import SqlUserStore
from profilectl.services.update import ProfileUpdateService
from tests.conftest import add_user


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("profilectl")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("profilectl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("profilectl").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("profilectl.test")
        log.warning("json test", user_id="usr_1")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["user_id"] == "usr_1"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "profilectl.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("profilectl.services.update").info("Updated profile usr_1")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Updated profile usr_1"
        assert parsed["level"] == "info"
        assert parsed["logger"] == "profilectl.services.update"

    def test_sqlalchemy_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sqlalchemy.engine").debug("statement noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestProfileContext:
    def test_stdlib_records_carry_bound_context(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        with structlog.contextvars.bound_contextvars(op="update_profile", user_id="usr_1"):
            logging.getLogger("profilectl.services.update").info("Updated profile")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["op"] == "update_profile"
        assert parsed["user_id"] == "usr_1"

    def test_update_service_logs_with_operation_context(
        self,
        capfd: pytest.CaptureFixture[str],
        store: SqlUserStore,
        registry: FieldRegistry,
    ) -> None:
        add_user(store, "ann@x.com", user_id="usr_ann")
        configure_logging(verbose=True, log_json=True)
        ProfileUpdateService(store, registry).update(
            "usr_ann", ProfileUpdate(additional_fields={"plan": "pro"})
        )
        lines = [json.loads(line) for line in capfd.readouterr().err.splitlines() if line]
        updated = next(line for line in lines if line["event"].startswith("Updated profile"))
        assert updated["op"] == "update_profile"
        assert updated["user_id"] == "usr_ann"
        assert "user_id" not in structlog.contextvars.get_contextvars()

    def test_email_context_is_masked(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with structlog.contextvars.bound_contextvars(op="create_user", email="alice@mail.org"):
            structlog.get_logger("profilectl.test").info("creating")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["email"] == "a***@mail.org"


class TestMaskEmail:
    def test_masks_local_part(self) -> None:
        assert mask_email("alice@mail.org") == "a***@mail.org"

    def test_non_address(self) -> None:
        assert mask_email("not-an-email") == "***"
        assert mask_email("@mail.org") == "***"
