# ============================================================================
# CONTRACT TESTS
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Tests - Phase enum and event models
# PURPOSE: Verify Phase helpers, EventContext and LimitUsage
# CREATED: 19 OCT 2026
# ============================================================================
"""
Contract Tests

Run with:
    pytest tests/test_contracts.py -v
"""

import pytest
from pydantic import ValidationError

from core.contracts import EventContext, LimitUsage, Phase
from handlers.supervisor import HandlerSupervisor


class TestPhase:
    def test_seven_phases(self):
        assert len(Phase) == 7

    def test_values(self):
        assert Phase.BEFORE_INSERT.value == "before_insert"
        assert Phase.AFTER_UNDELETE.value == "after_undelete"

    def test_timing(self):
        assert Phase.BEFORE_DELETE.is_before
        assert not Phase.BEFORE_DELETE.is_after
        assert Phase.AFTER_INSERT.is_after
        assert [p for p in Phase if p.is_before] == [
            Phase.BEFORE_INSERT, Phase.BEFORE_UPDATE, Phase.BEFORE_DELETE,
        ]

    def test_operation(self):
        assert Phase.BEFORE_UPDATE.operation == "update"
        assert Phase.AFTER_UNDELETE.operation == "undelete"

    @pytest.mark.parametrize("phase", list(Phase))
    def test_callback_exists_on_supervisor(self, phase):
        assert callable(getattr(HandlerSupervisor, phase.callback_name))

    def test_from_parts(self):
        assert Phase.from_parts("after", "update") == Phase.AFTER_UPDATE
        assert Phase.from_parts(" Before ", "INSERT") == Phase.BEFORE_INSERT

    def test_from_parts_unknown(self):
        with pytest.raises(ValueError, match="Unknown trigger phase"):
            Phase.from_parts("before", "undelete")


class TestEventContext:
    def test_defaults(self):
        ctx = EventContext(phase=Phase.AFTER_INSERT)
        assert ctx.is_outer is True
        assert ctx.new_records == []
        assert ctx.old_records == []
        assert ctx.size == 0

    def test_phase_from_string(self):
        assert EventContext(phase="before_update").phase == Phase.BEFORE_UPDATE

    def test_invalid_phase(self):
        with pytest.raises(ValidationError):
            EventContext(phase="during_insert")

    def test_records_passed_through_untouched(self):
        record = object()
        ctx = EventContext(phase=Phase.AFTER_DELETE, old_records=[record])
        assert ctx.old_records[0] is record
        assert ctx.size == 1

    def test_frozen(self):
        ctx = EventContext(phase=Phase.AFTER_INSERT)
        with pytest.raises(ValidationError):
            ctx.phase = Phase.AFTER_UPDATE


class TestLimitUsage:
    def test_percent_used(self):
        assert LimitUsage(name="queries", used=45, limit=100).percent_used == 45.0

    def test_zero_limit(self):
        assert LimitUsage(name="callouts", used=0, limit=0).percent_used == 0.0

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            LimitUsage(name="queries", used=-1, limit=100)
