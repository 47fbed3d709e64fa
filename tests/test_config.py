from taskchain.config import getflag


class TestGetflag:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("TASKCHAIN_TEST_FLAG", raising=False)
        assert getflag("TASKCHAIN_TEST_FLAG") is False
        assert getflag("TASKCHAIN_TEST_FLAG", default=True) is True

    def test_true_values(self, monkeypatch):
        for value in ("true", "TRUE", "1"):
            monkeypatch.setenv("TASKCHAIN_TEST_FLAG", value)
            assert getflag("TASKCHAIN_TEST_FLAG") is True

    def test_false_values(self, monkeypatch):
        monkeypatch.setenv("TASKCHAIN_TEST_FLAG", "no")
        assert getflag("TASKCHAIN_TEST_FLAG", default=True) is False
