"""Tests for the consume-once track callbacks."""

import pytest

from soundsmith.domain.music.callbacks import CallbackState, OnceCallback


class TestOnceCallback:
    """Unit tests for OnceCallback."""

    def test_starts_pending(self):
        callback = OnceCallback(lambda: None)
        assert callback.state is CallbackState.PENDING
        assert not callback.fired

    def test_runs_exactly_once(self):
        calls = []
        callback = OnceCallback(lambda x: calls.append(x))

        callback(1)
        callback(2)

        assert calls == [1]
        assert callback.state is CallbackState.FIRED

    def test_clear_retires_without_running(self):
        calls = []
        callback = OnceCallback(lambda: calls.append("ran"))

        callback.clear()
        callback()

        assert calls == []
        assert callback.fired

    def test_reentrant_call_is_absorbed(self):
        calls = []

        def handler():
            calls.append("outer")
            callback()

        callback = OnceCallback(handler)
        callback()

        assert calls == ["outer"]

    def test_marked_fired_even_if_function_raises(self):
        def boom():
            raise RuntimeError("boom")

        callback = OnceCallback(boom)
        with pytest.raises(RuntimeError):
            callback()

        callback()
        assert callback.fired

    def test_none_is_a_noop(self):
        callback = OnceCallback(None)
        callback("ignored", key="value")
        assert callback.fired

    def test_repr_names_function_and_state(self):
        def on_start():
            return None

        assert "on_start" in repr(OnceCallback(on_start))
        assert "pending" in repr(OnceCallback(on_start))
