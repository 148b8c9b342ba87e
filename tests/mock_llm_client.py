"""
Fake AsyncOpenAI client for compliance analyzer tests.

Replays a scripted list of outcomes (reply text or exception) without
touching the network. The last outcome repeats once the script runs out.
"""

from types import SimpleNamespace

import httpx
import openai

NO_CHOICES = object()  # completion that came back without any choices

CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"

VALID_REPORT_JSON = (
    '{"overallScore": 85, "overallStatus": "COMPLIANT", "summary": "...", '
    '"findings": [], "criticalIssues": [], "positiveAspects": []}'
)


class FakeCompletions:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)

        if len(self._outcomes) > 1:
            outcome = self._outcomes.pop(0)
        else:
            outcome = self._outcomes[0]

        if isinstance(outcome, BaseException):
            raise outcome

        if outcome is NO_CHOICES:
            return SimpleNamespace(choices=[])

        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=outcome))]
        )


class FakeLLMClient:
    def __init__(self, *outcomes):
        self.completions = FakeCompletions(outcomes)
        self.chat = SimpleNamespace(completions=self.completions)
        self.closed = False

    @property
    def calls(self):
        return self.completions.calls

    async def close(self):
        self.closed = True


class RecordingSleep:
    """stands in for asyncio.sleep, records requested delays in seconds"""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def openai_error(error_cls, status_code, message, headers=None):
    response = httpx.Response(
        status_code,
        request=httpx.Request("POST", CHAT_URL),
        headers=headers or {},
    )
    return error_cls(message, response=response, body=None)
