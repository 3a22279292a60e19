import httpx
import openai
import pytest

from cardb.config import _candidates
from cardb.errors import ConfigurationError, ModelNotFound, RateLimited
from cardb.nlp.llm import ModelRouter, OpenAIBackend, translate_openai_error
from conftest import run


class ScriptedBackend:
    """`script[model_id]` is either the text to return or the exception to raise."""

    def __init__(self, script):
        self.script = script
        self.tried = []

    async def generate(self, model_id, prompt, *, temperature=0.2):
        self.tried.append(model_id)
        out = self.script[model_id]
        if isinstance(out, BaseException):
            raise out
        return out


def _api_error(cls, status):
    req = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return cls("boom", response=httpx.Response(status, request=req), body=None)


# ---------- Router ----------
def test_first_candidate_answers():
    backend = ScriptedBackend({"a": "hello", "b": "unused"})
    assert run(ModelRouter(backend, ["a", "b"]).complete("hi")) == "hello"
    assert backend.tried == ["a"]


def test_model_not_found_moves_to_next_candidate():
    backend = ScriptedBackend({"a": ModelNotFound("no such model"), "b": "from b"})
    assert run(ModelRouter(backend, ["a", "b"]).complete("hi")) == "from b"
    assert backend.tried == ["a", "b"]


def test_rate_limit_aborts_remaining_candidates():
    backend = ScriptedBackend({"a": RateLimited("429"), "b": "never"})
    with pytest.raises(RateLimited):
        run(ModelRouter(backend, ["a", "b"]).complete("hi"))
    assert backend.tried == ["a"]


def test_configuration_error_aborts():
    backend = ScriptedBackend({"a": ConfigurationError("bad key"), "b": "never"})
    with pytest.raises(ConfigurationError):
        run(ModelRouter(backend, ["a", "b"]).complete("hi"))
    assert backend.tried == ["a"]


def test_other_errors_try_next_then_reraise_last():
    first, last = RuntimeError("first"), TimeoutError("last")
    backend = ScriptedBackend({"a": first, "b": last})
    with pytest.raises(TimeoutError) as exc:
        run(ModelRouter(backend, ["a", "b"]).complete("hi"))
    assert exc.value is last
    assert backend.tried == ["a", "b"]


def test_router_needs_candidates():
    with pytest.raises(ValueError):
        ModelRouter(ScriptedBackend({}), [])


# ---------- OpenAI error translation ----------
@pytest.mark.parametrize("cls,status,expected", [
    (openai.RateLimitError, 429, RateLimited),
    (openai.AuthenticationError, 401, ConfigurationError),
    (openai.PermissionDeniedError, 403, ConfigurationError),
    (openai.NotFoundError, 404, ModelNotFound),
])
def test_translate_openai_error(cls, status, expected):
    assert isinstance(translate_openai_error(_api_error(cls, status)), expected)


def test_unknown_openai_error_passes_through():
    err = _api_error(openai.InternalServerError, 500)
    assert translate_openai_error(err) is err


def test_backend_without_key_is_a_configuration_error():
    backend = OpenAIBackend("")
    with pytest.raises(ConfigurationError):
        run(backend.generate("gpt-4o-mini", "hi"))


def test_candidates_keep_order_and_drop_duplicates():
    assert _candidates("gpt-4o-mini", "gpt-4.1-mini, gpt-4o-mini,,o3") == ["gpt-4o-mini", "gpt-4.1-mini", "o3"]
