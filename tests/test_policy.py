"""
Tests for the per-level depth policy and its process-wide snapshot.
"""

import logging
import threading

import pytest

from zlog.policy import (
    DEFAULT_MAX_DEPTH,
    FALLBACK_MAX_DEPTH,
    DepthPolicy,
    Level,
    LevelConfig,
    auto_callstack_config,
    auto_source_config,
    configure,
    get_config,
    max_callstack_depth_config,
    reset_config,
    set_config,
)

# ---------------------------------------------------------------------------
# Level
# ---------------------------------------------------------------------------


class TestLevel:
    def test_values_align_with_stdlib(self):
        assert Level.DEBUG == logging.DEBUG
        assert Level.INFO == logging.INFO
        assert Level.WARN == logging.WARNING
        assert Level.ERROR == logging.ERROR

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Level.INFO, Level.INFO),
            ("debug", Level.DEBUG),
            ("WARN", Level.WARN),
            ("warning", Level.WARN),
            (" Error ", Level.ERROR),
            (logging.INFO, Level.INFO),
        ],
    )
    def test_parse(self, value, expected):
        assert Level.parse(value) is expected

    @pytest.mark.parametrize("value", ["fatal", "", 15, None, True])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            Level.parse(value)


# ---------------------------------------------------------------------------
# DepthPolicy
# ---------------------------------------------------------------------------


class TestDepthPolicy:
    def test_default_depths(self):
        policy = DepthPolicy()
        assert policy.effective_max_depth(Level.DEBUG) == 20
        assert policy.effective_max_depth(Level.INFO) == 5
        assert policy.effective_max_depth(Level.WARN) == 5
        assert policy.effective_max_depth(Level.ERROR) == 10

    def test_configured_depth_wins(self):
        policy = configure(max_callstack_depth_config(Level.ERROR, 3))
        assert policy.effective_max_depth(Level.ERROR) == 3
        assert policy.effective_max_depth(Level.DEBUG) == 20

    @pytest.mark.parametrize("depth", [0, -4, None])
    def test_non_positive_depth_falls_back_to_default(self, depth):
        policy = configure(max_callstack_depth_config(Level.INFO, depth))
        assert policy.effective_max_depth(Level.INFO) == DEFAULT_MAX_DEPTH[Level.INFO]

    @pytest.mark.parametrize("level", ["bogus", 99, None])
    def test_unrecognized_level_uses_fallback(self, level):
        assert DepthPolicy().effective_max_depth(level) == FALLBACK_MAX_DEPTH

    def test_flags_default_false(self):
        policy = DepthPolicy()
        for level in Level:
            assert policy.auto_source(level) is False
            assert policy.auto_callstack(level) is False

    def test_flags_for_unrecognized_level(self):
        policy = configure(auto_source_config(Level.ERROR, True))
        assert policy.auto_source("bogus") is False

    def test_configure_applies_options_per_level(self):
        policy = configure(
            auto_source_config(Level.ERROR, True),
            auto_callstack_config(Level.ERROR, True),
            max_callstack_depth_config(Level.ERROR, 8),
            auto_source_config("debug", True),
        )
        assert policy.level_config(Level.ERROR) == LevelConfig(True, True, 8)
        assert policy.level_config(Level.DEBUG) == LevelConfig(auto_source=True)
        assert policy.level_config(Level.INFO) == LevelConfig()

    def test_later_option_overrides_earlier(self):
        policy = configure(
            auto_source_config(Level.WARN, True),
            auto_source_config(Level.WARN, False),
        )
        assert policy.auto_source(Level.WARN) is False

    def test_levels_mapping_is_read_only(self):
        policy = DepthPolicy()
        with pytest.raises(TypeError):
            policy.levels[Level.INFO] = LevelConfig(auto_source=True)

    def test_equality(self):
        a = configure(auto_source_config(Level.INFO, True))
        b = configure(auto_source_config(Level.INFO, True))
        assert a == b
        assert a != DepthPolicy()

    def test_option_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            auto_source_config("verbose", True)


# ---------------------------------------------------------------------------
# Process-wide snapshot
# ---------------------------------------------------------------------------


class TestGlobalPolicy:
    def test_starts_with_defaults(self):
        assert get_config() == DepthPolicy()

    def test_set_config_replaces_wholesale(self):
        set_config(configure(auto_source_config(Level.ERROR, True)))
        set_config(configure(auto_callstack_config(Level.INFO, True)))

        current = get_config()
        assert current.auto_source(Level.ERROR) is False
        assert current.auto_callstack(Level.INFO) is True

    def test_reset_config(self):
        set_config(configure(max_callstack_depth_config(Level.DEBUG, 2)))
        reset_config()
        assert get_config().effective_max_depth(Level.DEBUG) == 20

    def test_set_config_rejects_other_types(self):
        with pytest.raises(TypeError):
            set_config({"error": {"autoSource": True}})

    def test_readers_never_see_mixed_policy(self):
        enabled = configure(
            *[auto_source_config(level, True) for level in Level],
            *[max_callstack_depth_config(level, 3) for level in Level],
        )
        disabled = DepthPolicy()
        stop = threading.Event()
        mixed = []

        def writer():
            while not stop.is_set():
                set_config(enabled)
                set_config(disabled)

        def reader():
            for _ in range(2000):
                policy = get_config()
                sources = {policy.auto_source(level) for level in Level}
                depths = {policy.effective_max_depth(level) == 3 for level in Level}
                if len(sources) != 1 or depths != sources:
                    mixed.append(policy)

        writer_thread = threading.Thread(target=writer)
        readers = [threading.Thread(target=reader) for _ in range(4)]
        writer_thread.start()
        for t in readers:
            t.start()
        for t in readers:
            t.join()
        stop.set()
        writer_thread.join()

        assert mixed == []
