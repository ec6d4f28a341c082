"""LLMClient model fallback against a scripted HTTP session."""

import requests

from analysis.ai_commentary.commentary_generator import CommentaryGenerator, STATIC_MODEL
from analysis.reporting.llm_client import LLMClient
from analysis.technical_scorers.technical_scorer import TechnicalScorer
from utils.unified_schema import CompanyProfile, StockContext

from conftest import make_quote


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.payload = payload
        self.text = text

    def json(self):
        if self.payload is None:
            raise ValueError("no body")
        return self.payload


def completion(text):
    return FakeResponse(200, {'choices': [{'message': {'role': 'assistant', 'content': text}}]})


class FakeSession:
    """Answers per model name; unknown models get a 503."""

    def __init__(self, by_model):
        self.by_model = by_model
        self.models_tried = []
        self.headers = []

    def post(self, url, json=None, headers=None, timeout=None):
        model = json['model']
        self.models_tried.append(model)
        self.headers.append(headers)
        reply = self.by_model.get(model, FakeResponse(503, text="overloaded"))
        if isinstance(reply, Exception):
            raise reply
        return reply


def client(by_model, models=('m/one', 'm/two', 'm/three'), token="hf_test"):
    session = FakeSession(by_model)
    return LLMClient(api_token=token, models=list(models), session=session), session


def test_first_model_answers():
    llm, session = client({'m/one': completion("  hello  ")})
    result = llm.generate_text("prompt")
    assert result.text == "hello"
    assert result.model == 'm/one'
    assert session.models_tried == ['m/one']
    assert session.headers[0]['Authorization'] == "Bearer hf_test"


def test_falls_through_failures_in_order():
    llm, session = client({
        'm/one': requests.exceptions.Timeout("slow"),
        'm/two': completion(""),
        'm/three': completion("third time lucky"),
    })
    result = llm.generate_text("prompt")
    assert result.model == 'm/three'
    assert session.models_tried == ['m/one', 'm/two', 'm/three']


def test_bad_json_body_counts_as_failure():
    llm, _ = client({'m/one': FakeResponse(200, None), 'm/two': completion("ok")})
    assert llm.generate_text("prompt").model == 'm/two'


def test_all_models_fail_returns_none():
    llm, session = client({})
    assert llm.generate_text("prompt") is None
    assert len(session.models_tried) == 3


def test_extra_models_appended_and_hint_first():
    llm, session = client({})
    llm.generate_text("prompt", extra_models=['m/two', 'm/extra'], model_hint='m/three')
    assert session.models_tried == ['m/three', 'm/one', 'm/two', 'm/extra']


def test_no_token_disables_generation():
    llm, session = client({'m/one': completion("hi")}, token="")
    assert not llm.enabled
    assert llm.generate_text("prompt") is None
    assert session.models_tried == []


def test_non_object_body_counts_as_failure():
    llm, session = client({
        'm/one': FakeResponse(200, ["unexpected", "list", "body"]),
        'm/two': completion("ok"),
    })
    result = llm.generate_text("prompt")
    assert result.model == 'm/two'
    assert session.models_tried == ['m/one', 'm/two']


def test_misshapen_choices_count_as_failure():
    llm, session = client({
        'm/one': FakeResponse(200, {'choices': ["just a string"]}),
        'm/two': FakeResponse(200, {'choices': {'message': 'not a list'}}),
        'm/three': FakeResponse(200, {'choices': [{'message': {'content': 42}}]}),
    })
    assert llm.generate_text("prompt") is None
    assert session.models_tried == ['m/one', 'm/two', 'm/three']


def test_list_body_leaves_stock_narrative_on_static_fallback(rising_series):
    llm, _ = client({model: FakeResponse(200, []) for model in ('m/one', 'm/two', 'm/three')})
    context = StockContext(
        symbol="RISE",
        quote=make_quote("RISE", 150.0),
        indicators=TechnicalScorer(rising_series).calculate(),
        profile=CompanyProfile(name="Rise Corp"),
    )
    result = CommentaryGenerator(llm_client=llm).analyze_stock(context)
    assert result.model == STATIC_MODEL
