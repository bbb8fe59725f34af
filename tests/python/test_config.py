"""
Tests for call configuration defaults and thread-local overrides.
"""

import threading

from mlbind import CallConfig, config


class TestCallConfig:
    """Test default values and environment flags."""

    def test_defaults(self):
        call = config.call
        assert call.points_are_rows is True
        assert call.copy_all_inputs is False
        assert call.verbose is False

    def test_env_flags(self, monkeypatch):
        monkeypatch.setenv('MLBIND_VERBOSE', '1')
        monkeypatch.setenv('MLBIND_COPY_INPUTS', 'true')
        config.reset()
        assert config.call.verbose is True
        assert config.call.copy_all_inputs is True

    def test_env_flag_off(self, monkeypatch):
        monkeypatch.setenv('MLBIND_VERBOSE', '0')
        config.reset()
        assert config.call.verbose is False

    def test_global_setter(self):
        config.call = CallConfig(verbose=True)
        assert config.call.verbose is True
        config.reset()
        assert config.call.verbose is False


class TestLocalConfig:
    """Test config.local()."""

    def test_override_and_restore(self):
        with config.local(points_are_rows=False) as call:
            assert call.points_are_rows is False
            assert config.call is call
        assert config.call.points_are_rows is True

    def test_nested(self):
        with config.local(verbose=True):
            with config.local(points_are_rows=False):
                assert config.call.verbose is True
                assert config.call.points_are_rows is False
            assert config.call.points_are_rows is True
            assert config.call.verbose is True
        assert config.call.verbose is False

    def test_restored_on_error(self):
        try:
            with config.local(verbose=True):
                raise RuntimeError('boom')
        except RuntimeError:
            pass
        assert config.call.verbose is False

    def test_thread_isolation(self):
        """Overrides are invisible to other threads."""
        seen = []
        with config.local(points_are_rows=False):
            thread = threading.Thread(target=lambda: seen.append(config.call.points_are_rows))
            thread.start()
            thread.join()
        assert seen == [True]
