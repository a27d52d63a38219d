# flake8: noqa
import base64
import sys
from pathlib import Path

# Ensure project root is on sys.path so `recipe_finder` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
import requests

from recipe_finder.config import Settings
from recipe_finder.errors import RecognitionError, RecognitionNotConfigured, RecognitionRateLimited
from recipe_finder.recognition import (
    AuthMode,
    RecognitionClient,
    parse_detections,
    strip_data_url,
)

IMAGE_B64 = base64.b64encode(b"\xff\xd8\xff fake jpeg").decode()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self._text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _settings(**overrides):
    values = dict(
        logmeal_api_key="secret-key",
        logmeal_base_url="https://api.example.test/",
        recognition_min_confidence=0.3,
        recognition_timeout=5,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


SEGMENTATION = {
    "segmentation_results": [
        {"recognition_results": [
            {"name": "Tomatoes", "prob": 0.9},
            {"name": "pad thai", "prob": 0.4},
            {"name": "noise", "prob": 0.1},
        ]},
        {"recognition_results": [{"name": "eggs", "prob": 0.35}]},
    ]
}


def test_strip_data_url():
    assert strip_data_url("data:image/png;base64,AAAA") == "AAAA"
    assert strip_data_url("AAAA") == "AAAA"


def test_parse_segmentation_shape():
    detections = parse_detections(SEGMENTATION, 0.3)
    assert [d.name for d in detections] == ["tomato", "pad thai", "egg"]
    assert [d.mapped for d in detections] == [True, False, True]
    assert detections[0].label == "Tomatoes"
    assert detections[0].confidence == 0.9


def test_parse_threshold_is_caller_chosen():
    assert len(parse_detections(SEGMENTATION, 0.05)) == 4
    assert len(parse_detections(SEGMENTATION, 0.5)) == 1


def test_parse_score_at_threshold_is_dropped():
    payload = {"recognition_results": [{"name": "rice", "prob": 0.3}, {"name": "lime", "prob": 0.31}]}
    assert [d.name for d in parse_detections(payload, 0.3)] == ["lime"]


def test_parse_family_at_half_is_dropped():
    payload = {"foodFamily": [{"name": "fruits", "prob": 0.5}, {"name": "vegetables", "prob": 0.51}]}
    assert [d.name for d in parse_detections(payload, 0.3)] == ["vegetable"]


def test_parse_flat_recognition_shape():
    payload = {"recognition_results": [{"name": "carrots", "prob": 0.8}, {"prob": 0.9}]}
    assert [d.name for d in parse_detections(payload, 0.3)] == ["carrot"]


def test_parse_results_shape_uses_confidence():
    payload = {"results": [{"name": "onion", "confidence": 0.7}, {"name": "x", "prob": 0.9}]}
    assert [d.name for d in parse_detections(payload, 0.3)] == ["onion"]


def test_parse_segmentation_takes_priority():
    payload = dict(SEGMENTATION, results=[{"name": "onion", "confidence": 0.9}])
    assert "onion" not in [d.name for d in parse_detections(payload, 0.3)]


def test_parse_food_families():
    payload = {
        "foodFamily": [
            {"name": "vegetables", "prob": 0.8},
            {"name": "_empty_", "prob": 0.9},
            {"name": "fruits", "prob": 0.4},
        ],
        "recognition_results": [{"name": "lime", "prob": 0.6}],
    }
    assert [d.name for d in parse_detections(payload, 0.3)] == ["vegetable", "lime"]


def test_parse_garbage():
    assert parse_detections(None, 0.3) == []
    assert parse_detections({"results": "nope"}, 0.3) == []
    assert parse_detections({"segmentation_results": ["x"]}, 0.3) == []


def test_detect_api_key_mode():
    session = FakeSession(FakeResponse(200, SEGMENTATION))
    client = RecognitionClient(_settings(), session=session)
    detections = client.detect("data:image/jpeg;base64," + IMAGE_B64)
    assert [d.name for d in detections] == ["tomato", "pad thai", "egg"]

    url, kwargs = session.calls[0]
    assert url == "https://api.example.test/v2/image/segmentation/complete"
    assert kwargs["headers"]["Authorization"] == "Bearer secret-key"
    name, data, content_type = kwargs["files"]["image"]
    assert (name, content_type) == ("image.jpg", "image/jpeg")
    assert data == base64.b64decode(IMAGE_B64)
    assert kwargs["timeout"] == 5


def test_detect_user_token_env_mode():
    session = FakeSession(FakeResponse(200, {"results": []}))
    client = RecognitionClient(
        _settings(logmeal_auth_mode="user_token_env", logmeal_user_token="user-token"),
        session=session,
    )
    assert client.detect(IMAGE_B64) == []
    assert session.calls[0][1]["headers"]["Authorization"] == "Bearer user-token"


def test_user_token_env_mode_needs_token():
    client = RecognitionClient(_settings(logmeal_auth_mode="user_token_env"), session=FakeSession())
    assert client.auth_mode is AuthMode.USER_TOKEN_ENV
    assert not client.configured
    with pytest.raises(RecognitionNotConfigured):
        client.detect(IMAGE_B64)


def test_autocreate_mode_signs_up_once():
    session = FakeSession(
        FakeResponse(200, {"token": "fresh-token", "user_id": 1}),
        FakeResponse(200, SEGMENTATION),
        FakeResponse(200, SEGMENTATION),
    )
    client = RecognitionClient(_settings(logmeal_auth_mode="user_token_autocreate"), session=session)
    client.detect(IMAGE_B64)
    client.detect(IMAGE_B64)

    urls = [url for url, _ in session.calls]
    assert urls[0] == "https://api.example.test/v2/users/signUp"
    assert session.calls[0][1]["headers"]["Authorization"] == "Bearer secret-key"
    assert urls[1:] == ["https://api.example.test/v2/image/segmentation/complete"] * 2
    assert session.calls[2][1]["headers"]["Authorization"] == "Bearer fresh-token"


def test_not_configured_without_key():
    client = RecognitionClient(_settings(logmeal_api_key=None), session=FakeSession())
    with pytest.raises(RecognitionNotConfigured):
        client.detect(IMAGE_B64)


def test_rate_limited():
    client = RecognitionClient(_settings(), session=FakeSession(FakeResponse(429, {"message": "limit"})))
    with pytest.raises(RecognitionRateLimited):
        client.detect(IMAGE_B64)


def test_upstream_error_status():
    client = RecognitionClient(_settings(), session=FakeSession(FakeResponse(500, {"error": "boom"})))
    with pytest.raises(RecognitionError) as exc:
        client.detect(IMAGE_B64)
    assert exc.value.status_code == 500


def test_transport_error_is_translated():
    client = RecognitionClient(_settings(), session=FakeSession(error=requests.ConnectionError("down")))
    with pytest.raises(RecognitionError):
        client.detect(IMAGE_B64)


def test_non_json_body():
    client = RecognitionClient(_settings(), session=FakeSession(FakeResponse(200, None)))
    with pytest.raises(RecognitionError):
        client.detect(IMAGE_B64)


def test_bad_base64():
    client = RecognitionClient(_settings(), session=FakeSession())
    with pytest.raises(RecognitionError) as exc:
        client.detect("not base64!!")
    assert exc.value.status_code == 400


def test_bad_base64_does_not_sign_up():
    session = FakeSession()
    client = RecognitionClient(_settings(logmeal_auth_mode="user_token_autocreate"), session=session)
    with pytest.raises(RecognitionError) as exc:
        client.detect("not base64!!")
    assert exc.value.status_code == 400
    assert session.calls == []
