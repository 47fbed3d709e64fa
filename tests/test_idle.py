import asyncio
from unittest.mock import Mock
import pytest
from taskchain.util.idle import idle_add


class TestIdleAdd:
    def test_without_loop_schedules_nothing(self, mocker):
        timer = mocker.patch("threading.Timer")
        callback = Mock()

        assert idle_add(callback, 1, key="value") is False

        callback.assert_not_called()
        timer.assert_not_called()

    @pytest.mark.asyncio
    async def test_inside_loop_uses_call_soon(self):
        callback = Mock()

        assert idle_add(callback, "a") is True
        assert idle_add(callback, "b", key="c") is True
        callback.assert_not_called()

        await asyncio.sleep(0)

        assert callback.call_args_list[0].args == ("a",)
        assert callback.call_args_list[1].args == ("b",)
        assert callback.call_args_list[1].kwargs == {"key": "c"}
