"""Tests for hashing, IDs, JSON, request validation and logging."""

import pytest
import structlog
from hypothesis import given, strategies as st
from ulid import ULID

from folio.core import (
    LogContext,
    PreviewRequest,
    SnippetRequest,
    ValidationError,
    safe_json_dumps,
    validate_source,
)
from folio.core.hash import hash_fields, hash_string
from folio.core.id import (
    Prefix,
    new_request_id,
    new_session_id,
)
from folio.core.logging_config import MAX_VALUE_LENGTH, clip_long_values


# ============================================================================
# Hashing
# ============================================================================

@pytest.mark.unit
def test_hash_string_is_xxhash64():
    digest = hash_string("test")
    assert len(digest) == 16
    assert int(digest, 16) >= 0
    assert digest != hash_string("test ")


@pytest.mark.unit
def test_hash_fields_order_matters():
    """Test multi-field hashing."""
    forward = hash_fields("Callout", "ProjectMetrics")
    assert forward == hash_fields("Callout", "ProjectMetrics")
    assert forward != hash_fields("ProjectMetrics", "Callout")
    # Field boundaries are significant
    assert hash_fields("ab", "c") != hash_fields("a", "bc")


@given(st.text())
def test_hash_deterministic(text):
    """Property: same input, same digest."""
    assert hash_string(text) == hash_string(text)


# ============================================================================
# IDs
# ============================================================================

@pytest.mark.unit
def test_session_and_request_ids():
    """IDs carry their type prefix and a valid ULID."""
    session = new_session_id()
    request = new_request_id()

    assert session.startswith(f"{Prefix.SESSION}_")
    assert request.startswith(f"{Prefix.REQUEST}_")
    for value in (session, request):
        ulid_part = value.split("_", 1)[1]
        assert str(ULID.from_str(ulid_part)) == ulid_part
    assert new_session_id() != session


# ============================================================================
# JSON
# ============================================================================

@pytest.mark.unit
def test_safe_json_dumps_compact_and_indented():
    data = {"name": "Next.js", "icon": "▲"}

    assert safe_json_dumps(data) == '{"name":"Next.js","icon":"▲"}'
    assert "\n" in safe_json_dumps(data, indent=2)


# ============================================================================
# Validation
# ============================================================================

@pytest.mark.unit
def test_preview_request_accepts_blank_source():
    assert PreviewRequest().source == ""
    assert PreviewRequest(source="   ").source == "   "


@pytest.mark.unit
def test_preview_request_rejects_oversized_source(settings):
    with pytest.raises(Exception):
        PreviewRequest(source="x" * (settings.max_source_length + 1))


@pytest.mark.unit
def test_snippet_request_is_strict():
    req = SnippetRequest(values={"title": "Note"}, children="Body")
    assert req.values == {"title": "Note"}

    with pytest.raises(Exception):
        SnippetRequest(values={}, unexpected=True)

    with pytest.raises(Exception):
        SnippetRequest(values={f"p{i}": i for i in range(100)})


@pytest.mark.unit
def test_validate_source(settings):
    assert validate_source("# Hi") == "# Hi"

    with pytest.raises(ValidationError):
        validate_source(42)

    with pytest.raises(ValidationError):
        validate_source("x" * (settings.max_source_length + 1))


# ============================================================================
# Logging
# ============================================================================

@pytest.mark.unit
def test_long_values_are_clipped():
    source = "x" * (MAX_VALUE_LENGTH + 50)
    event = clip_long_values(None, "info", {"event": "preview_update", "source": source, "length": 250})

    assert event["source"].startswith("x" * MAX_VALUE_LENGTH)
    assert event["source"].endswith(f"({len(source)} chars)")
    assert event["length"] == 250
    assert event["event"] == "preview_update"


@pytest.mark.unit
def test_log_context_nests():
    before = structlog.contextvars.get_contextvars()
    with LogContext(session_id="sess_outer"):
        with LogContext(session_id="sess_inner", request_id="req_1"):
            assert structlog.contextvars.get_contextvars() == {**before, "session_id": "sess_inner", "request_id": "req_1"}
        assert structlog.contextvars.get_contextvars() == {**before, "session_id": "sess_outer"}
    assert structlog.contextvars.get_contextvars() == before
