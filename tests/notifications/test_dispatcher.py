"""Unit tests for the sequential per-token dispatcher."""

import pytest

from notifyhub.errors import ValidationError
from notifyhub.notifications.dispatcher import (
    DeliveryResult,
    dispatch,
    resolve_tokens,
    stringify_data,
)
from tests.conftest import FakePushProvider


class TestDispatch:
    async def test_all_succeed(self):
        provider = FakePushProvider(rejected=())
        outcome = await dispatch(provider, "Hi", "There", {"k": "v"}, ["t1", "t2", "t3"])
        assert outcome.success_count == 3
        assert outcome.failure_count == 0
        assert [r.token for r in outcome.results] == ["t1", "t2", "t3"]
        assert all(r.message_id for r in outcome.results)

    async def test_rejections_do_not_abort_the_batch(self):
        provider = FakePushProvider(rejected={"t2"})
        outcome = await dispatch(provider, "Hi", "There", None, ["t1", "t2", "t3"])
        assert [m.token for m in provider.sent] == ["t1", "t2", "t3"]
        assert [r.success for r in outcome.results] == [True, False, True]
        assert outcome.results[1].error == "Requested entity was not found."

    async def test_counts_match_attempts(self):
        tokens = ["ok-1", "bad-token-1", "ok-2", "bad-token-2", "ok-3"]
        outcome = await dispatch(FakePushProvider(), "Hi", "There", None, tokens)
        assert outcome.success_count + outcome.failure_count == len(tokens)
        assert len(outcome.results) == len(tokens)
        assert (outcome.success_count, outcome.failure_count) == (3, 2)

    async def test_all_rejected_still_returns(self):
        outcome = await dispatch(FakePushProvider(), "Hi", "There", None, ["bad-token-1", "bad-token-2"])
        assert outcome.success_count == 0
        assert outcome.failure_count == 2

    async def test_timeout_counts_as_failure(self):
        provider = FakePushProvider(rejected=(), delay=0.2)
        outcome = await dispatch(provider, "Hi", "There", None, ["slow"], timeout=0.01)
        assert outcome.failure_count == 1
        assert "Timed out" in outcome.results[0].error

    async def test_message_fields_forwarded(self):
        provider = FakePushProvider(rejected=())
        await dispatch(provider, "Title", "Body", {"orderId": 42, "kind": "promo"}, ["t1"])
        message = provider.sent[0]
        assert (message.token, message.title, message.body) == ("t1", "Title", "Body")
        assert message.data == {"orderId": "42", "kind": "promo"}

    @pytest.mark.parametrize(("title", "body"), [("", "Body"), ("Title", "")])
    async def test_title_and_body_required(self, title, body):
        with pytest.raises(ValidationError):
            await dispatch(FakePushProvider(), title, body, None, ["t1"])

    async def test_tokens_required(self):
        with pytest.raises(ValidationError):
            await dispatch(FakePushProvider(), "Hi", "There", None, [])


class TestDeliveryResult:
    def test_success_shape(self):
        assert DeliveryResult("t", True, message_id="m-1").to_dict() == {
            "token": "t", "success": True, "messageId": "m-1",
        }

    def test_failure_shape(self):
        assert DeliveryResult("t", False, error="boom").to_dict() == {
            "token": "t", "success": False, "error": "boom",
        }


class TestResolveTokens:
    def test_requested_wins(self):
        assert resolve_tokens(["a"], ["x", "y"]) == ["a"]

    def test_empty_request_falls_back(self):
        assert resolve_tokens([], ["x", "y"]) == ["x", "y"]
        assert resolve_tokens(None, ["x"]) == ["x"]

    def test_nothing_anywhere(self):
        assert resolve_tokens(None, []) == []


class TestStringifyData:
    def test_strings_untouched(self):
        assert stringify_data({"a": "b"}) == {"a": "b"}

    def test_other_values_json_encoded(self):
        assert stringify_data({"n": 1, "flag": True, "obj": {"x": [1]}}) == {
            "n": "1", "flag": "true", "obj": '{"x": [1]}',
        }

    def test_empty(self):
        assert stringify_data(None) == {}
