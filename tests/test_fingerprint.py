"""Tests for link fingerprints."""

import uuid

from spotlight_harvest.core.fingerprint import fingerprint


def test_fingerprint_is_deterministic():
    link = "https://techcabal.com/2025/01/02/startup-raises-series-a/"
    assert fingerprint(link) == fingerprint(link)


def test_fingerprint_is_namespaced_uuid5():
    """Value must depend only on the link, never on process state."""
    link = "https://african.business/technology/"
    value = fingerprint(link)
    assert value == str(uuid.uuid5(uuid.NAMESPACE_URL, link))
    assert uuid.UUID(value).version == 5


def test_fingerprint_differs_per_link():
    assert fingerprint("https://example.com/a") != fingerprint("https://example.com/b")
