"""Observability bootstrap: JSON logging, request metrics and audit trail."""

from __future__ import annotations

from familyhub.obs import logging as obs_logging
from familyhub.obs import middleware
from familyhub.settings import settings

_initialised = False


def init(app) -> None:
	"""Configure logging once per process and install request instrumentation."""
	global _initialised
	if not _initialised:
		obs_logging.configure_logging()
		_initialised = True
	middleware.install(app, enabled=settings.obs_enabled)


__all__ = ["init"]
