"""
Unit tests for release toggle reads and deferred unknown-toggle notices.
"""

import pytest

from release_toggles.release_toggle import (
    REASON_ENTITLEMENTS_UNAVAILABLE,
    REASON_UNKNOWN_KEY,
    DeferredEffectQueue,
    ReleaseToggleReader,
    UnknownToggleNotice,
    use_release_toggle,
)


class TestUseReleaseToggle:
    """Value lookup and default handling."""

    def test_returns_entitlement_value_when_present(self):
        effects = DeferredEffectQueue()

        assert use_release_toggle({"beta": False}, "beta", effects=effects) is False
        assert use_release_toggle({"tier": "gold"}, "tier", effects=effects) == "gold"
        assert effects.pending == []

    def test_present_key_with_falsy_value_is_not_treated_as_absent(self):
        effects = DeferredEffectQueue()

        assert use_release_toggle({"beta": None}, "beta", default_value=True, effects=effects) is None
        assert effects.pending == []

    def test_absent_key_returns_default_true(self):
        assert use_release_toggle({}, "missing") is True

    def test_absent_key_returns_custom_default(self):
        assert use_release_toggle({"other": True}, "missing", default_value=False) is False

    def test_unavailable_entitlements_return_default(self):
        assert use_release_toggle(None, "anything", default_value="fallback") == "fallback"


class TestUnknownToggleNotices:
    """Notices are requested, not delivered, during a read."""

    def test_absent_key_schedules_notice(self):
        effects = DeferredEffectQueue()

        use_release_toggle({"known": True}, "missing", effects=effects)

        assert effects.pending == [UnknownToggleNotice("missing", REASON_UNKNOWN_KEY)]

    def test_unavailable_entitlements_reason(self):
        effects = DeferredEffectQueue()

        use_release_toggle(None, "missing", effects=effects)

        assert effects.pending == [UnknownToggleNotice("missing", REASON_ENTITLEMENTS_UNAVAILABLE)]

    def test_alert_if_unknown_false_schedules_nothing(self):
        effects = DeferredEffectQueue()

        use_release_toggle({}, "missing", alert_if_unknown=False, effects=effects)

        assert effects.pending == []

    def test_alert_not_called_until_flush(self):
        delivered = []
        effects = DeferredEffectQueue(alert=lambda key, reason: delivered.append((key, reason)))

        use_release_toggle({}, "missing", effects=effects)
        assert delivered == []

        assert effects.flush() == 1
        assert delivered == [("missing", REASON_UNKNOWN_KEY)]
        assert effects.pending == []

    def test_repeated_reads_queue_one_notice(self):
        effects = DeferredEffectQueue()

        for _ in range(3):
            use_release_toggle({}, "missing", effects=effects)
        use_release_toggle({}, "other", effects=effects)

        assert [notice.toggle_key for notice in effects.pending] == ["missing", "other"]

    def test_flush_without_alert_discards(self):
        effects = DeferredEffectQueue()
        use_release_toggle({}, "missing", effects=effects)

        assert effects.flush() == 1
        assert effects.pending == []

    def test_failing_alert_is_logged_and_others_still_delivered(self, caplog):
        delivered = []

        def alert(key, reason):
            if key == "boom":
                raise RuntimeError("sink down")
            delivered.append(key)

        effects = DeferredEffectQueue(alert=alert)
        use_release_toggle({}, "boom", effects=effects)
        use_release_toggle({}, "fine", effects=effects)

        with caplog.at_level("ERROR"):
            assert effects.flush() == 2

        assert delivered == ["fine"]
        assert "Unknown-toggle alert failed for key 'boom'" in caplog.text

    def test_pending_is_a_copy(self):
        effects = DeferredEffectQueue()
        use_release_toggle({}, "missing", effects=effects)

        effects.pending.clear()

        assert len(effects.pending) == 1


class TestReleaseToggleReader:
    def test_reader_binds_entitlements_and_queue(self):
        reader = ReleaseToggleReader({"beta": False})

        assert reader.use("beta") is False
        assert reader.use("missing", default_value=False) is False
        assert reader.effects.pending == [UnknownToggleNotice("missing", REASON_UNKNOWN_KEY)]

    def test_reader_uses_supplied_queue(self):
        effects = DeferredEffectQueue()
        reader = ReleaseToggleReader(None, effects=effects)

        reader.use("missing", alert_if_unknown=True)

        assert reader.effects is effects
        assert len(effects.pending) == 1

    @pytest.mark.parametrize("alert_if_unknown", [True, False])
    def test_reader_honours_alert_option(self, alert_if_unknown):
        reader = ReleaseToggleReader({})

        reader.use("missing", alert_if_unknown=alert_if_unknown)

        assert bool(reader.effects.pending) is alert_if_unknown
