"""Tests for the credential-tier attempt policy."""
import asyncio
from contextlib import asynccontextmanager

import pytest

from leadlens.generation import GenerationClient, GenerationFailedError, GenerationCancelledError
from leadlens.llm.base import LLMError

from .conftest import FakeProvider, ALWAYS


class TestPrimaryTier:
    @pytest.mark.parametrize("failures", [0, 1, 2])
    async def test_primary_recovers_within_three_attempts(self, failures):
        primary = FakeProvider("primary", reply="ok", fail_times=failures)
        secondary = FakeProvider("secondary")
        client = GenerationClient(primary, secondary, default_model="m")

        assert await client.generate("prompt") == "ok"
        assert primary.calls == failures + 1
        assert secondary.calls == 0

    async def test_prompt_is_passed_unchanged(self):
        primary = FakeProvider("primary")
        client = GenerationClient(primary, default_model="m")

        await client.generate("exact prompt text")
        assert primary.prompts == ["exact prompt text"]

    async def test_provider_receives_only_the_assembled_prompt(self):
        import inspect
        from leadlens.llm.base import LLMProvider

        seen = {}

        class RecordingProvider(FakeProvider):
            async def generate_text(self, **kwargs):
                seen.update(kwargs)
                return "ok"

        client = GenerationClient(RecordingProvider(), default_model="m", max_tokens=64, temperature=0.2)
        await client.generate("prompt")

        assert seen == {"prompt": "prompt", "model": "m", "max_tokens": 64, "temperature": 0.2}
        assert list(inspect.signature(LLMProvider.generate_text).parameters) == [
            "self", "prompt", "model", "max_tokens", "temperature",
        ]


class TestSecondaryTier:
    async def test_secondary_called_once_after_three_primary_failures(self):
        primary = FakeProvider("primary", fail_times=ALWAYS)
        secondary = FakeProvider("secondary", reply="backup ok")
        client = GenerationClient(primary, secondary, default_model="m")

        assert await client.generate("prompt") == "backup ok"
        assert primary.calls == 3
        assert secondary.calls == 1

    async def test_both_tiers_failing_raises_with_secondary_cause(self):
        primary = FakeProvider("primary", fail_times=ALWAYS)
        secondary = FakeProvider("secondary", fail_times=ALWAYS)
        client = GenerationClient(primary, secondary, default_model="m")

        with pytest.raises(GenerationFailedError) as exc_info:
            await client.generate("prompt")

        assert primary.calls == 3
        assert secondary.calls == 1
        assert isinstance(exc_info.value.__cause__, LLMError)
        assert "secondary" in str(exc_info.value.__cause__)

    async def test_no_secondary_raises_from_last_primary_error(self):
        primary = FakeProvider("primary", fail_times=ALWAYS)
        client = GenerationClient(primary, None, default_model="m")

        with pytest.raises(GenerationFailedError) as exc_info:
            await client.generate("prompt")

        assert primary.calls == 3
        assert "primary failure #3" in str(exc_info.value.__cause__)


class TestAttemptBounds:
    async def test_timed_out_attempt_counts_as_failure(self):
        primary = FakeProvider("primary", delay=0.5)
        secondary = FakeProvider("secondary", reply="backup ok")
        client = GenerationClient(primary, secondary, default_model="m", attempt_timeout=0.05)

        assert await client.generate("prompt") == "backup ok"
        assert primary.calls == 3

    async def test_waiting_for_reservation_is_not_charged_to_the_attempt(self):
        class QueuedProvider(FakeProvider):
            @asynccontextmanager
            async def reserve(self):
                await asyncio.sleep(0.2)
                yield

        primary = QueuedProvider("primary", reply="ok")
        secondary = FakeProvider("secondary")
        client = GenerationClient(primary, secondary, default_model="m", attempt_timeout=0.05)

        assert await client.generate("prompt") == "ok"
        assert primary.calls == 1
        assert secondary.calls == 0

    async def test_gemini_reservation_serializes_on_the_configure_lock(self):
        from leadlens.llm import gemini_provider

        provider = gemini_provider.GeminiProvider("key", tier="primary")
        assert not gemini_provider._configure_lock.locked()
        async with provider.reserve():
            assert gemini_provider._configure_lock.locked()
        assert not gemini_provider._configure_lock.locked()

    async def test_cancel_before_first_attempt(self):
        primary = FakeProvider("primary")
        client = GenerationClient(primary, FakeProvider("secondary"), default_model="m")
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(GenerationCancelledError):
            await client.generate("prompt", cancel=cancel)
        assert primary.calls == 0

    async def test_cancel_stops_further_attempts(self):
        cancel = asyncio.Event()

        class CancellingProvider(FakeProvider):
            async def generate_text(self, prompt, model, **kwargs):
                cancel.set()
                return await super().generate_text(prompt, model, **kwargs)

        primary = CancellingProvider("primary", fail_times=ALWAYS)
        secondary = FakeProvider("secondary")
        client = GenerationClient(primary, secondary, default_model="m")

        with pytest.raises(GenerationCancelledError):
            await client.generate("prompt", cancel=cancel)
        assert primary.calls == 1
        assert secondary.calls == 0

    def test_at_least_one_attempt_required(self):
        with pytest.raises(ValueError):
            GenerationClient(FakeProvider(), default_model="m", primary_attempts=0)


def test_rate_limit_errors_are_classified():
    from leadlens.llm.base import LLMProvider, LLMRateLimitError

    assert isinstance(LLMProvider.classify_error("Gemini", Exception("429 quota exceeded")), LLMRateLimitError)
    assert type(LLMProvider.classify_error("OpenAI", Exception("bad request"))) is LLMError
