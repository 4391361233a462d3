import json
from datetime import datetime, timezone

import pytest

from disinfo_engine.history import HistoryStore, MemoryStore
from disinfo_engine.moderation.pipeline import ContentAnalyzer

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


class FirstChoice:
    """rng stand-in that always picks the first opener"""
    def choice(self, seq):
        return seq[0]


class FakeClassifier:
    def __init__(self, reply="", exc=None):
        self.reply = reply
        self.exc = exc
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return self.reply


class FakeExtractor:
    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        return url if self.result is None else self.result


def json_reply(**fields):
    data = {
        "classification": "Disinformation",
        "contentType": "Claim",
        "confidence": 92,
        "explanation": "This claim is false.",
        "keyTerms": ["flat earth"],
        "verificationSources": ["Snopes.com"],
        "recommendations": ["Check sources"],
    }
    data.update(fields)
    return "Analysis: " + json.dumps(data)


@pytest.fixture
def make_analyzer():
    def _make(reply="", exc=None, extracted=None, max_chars=10000, kv=None):
        classifier = FakeClassifier(reply, exc)
        extractor = FakeExtractor(extracted)
        history = HistoryStore(kv if kv is not None else MemoryStore(), clock=lambda: FIXED_NOW)
        analyzer = ContentAnalyzer(
            classify=classifier,
            extract=extractor,
            history=history,
            rng=FirstChoice(),
            clock=lambda: FIXED_NOW,
            max_chars=max_chars,
        )
        return analyzer, classifier, extractor
    return _make
