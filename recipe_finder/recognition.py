"""Client for the external food-recognition service (LogMeal).

The server holds the credential and forwards images on behalf of the
browser. Whatever the service answers, callers get either a list of
`Detection` objects or one of the `RecognitionError` subclasses; transport
exceptions from `requests` never escape this module.
"""
import base64
import binascii
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .errors import RecognitionError, RecognitionNotConfigured, RecognitionRateLimited
from .labels import map_label, suggest_ingredient
from .schemas import Detection

log = logging.getLogger(__name__)

SEGMENTATION_PATH = "/v2/image/segmentation/complete"
SIGNUP_PATH = "/v2/users/signUp"
FAMILY_MIN_CONFIDENCE = 0.5

_DATA_URL = re.compile(r"^data:image/\w+;base64,")


class AuthMode(str, Enum):
    API_KEY = "api_key"
    USER_TOKEN_ENV = "user_token_env"
    USER_TOKEN_AUTOCREATE = "user_token_autocreate"


def strip_data_url(image: str) -> str:
    return _DATA_URL.sub("", image or "")


def _detection(label: str, confidence: float) -> Detection:
    return Detection(
        name=suggest_ingredient(label),
        confidence=float(confidence),
        label=label,
        mapped=map_label(label) is not None,
    )


def _collect(entries, score_key: str, min_confidence: float) -> List[Detection]:
    out = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        score = entry.get(score_key)
        if not name or not isinstance(score, (int, float)):
            continue
        if score > min_confidence:
            out.append(_detection(name, score))
    return out


def parse_detections(payload: Dict[str, Any], min_confidence: float) -> List[Detection]:
    """Flatten the service's response into detections above a threshold.

    Three response shapes are accepted, tried in this order:
    `segmentation_results[].recognition_results[]` and
    `recognition_results[]` (both scored by `prob`), and `results[]`
    (scored by `confidence`). Food families come first when present.
    """
    if not isinstance(payload, dict):
        return []

    detections: List[Detection] = []
    for family in payload.get("foodFamily") or []:
        if not isinstance(family, dict):
            continue
        name = family.get("name")
        prob = family.get("prob")
        if not name or name == "_empty_" or not isinstance(prob, (int, float)):
            continue
        if prob > FAMILY_MIN_CONFIDENCE:
            detections.append(_detection(re.sub(r"s$", "", name), prob))

    segments = payload.get("segmentation_results")
    if segments:
        for segment in segments:
            if isinstance(segment, dict):
                detections.extend(
                    _collect(segment.get("recognition_results"), "prob", min_confidence)
                )
    elif payload.get("recognition_results"):
        detections.extend(_collect(payload["recognition_results"], "prob", min_confidence))
    elif isinstance(payload.get("results"), list):
        detections.extend(_collect(payload["results"], "confidence", min_confidence))
    return detections


class RecognitionClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.auth_mode = AuthMode(settings.logmeal_auth_mode)
        self.base_url = settings.logmeal_base_url.rstrip("/")
        self.session = session or requests.Session()
        self._user_token: Optional[str] = None

    def close(self) -> None:
        self.session.close()

    @property
    def configured(self) -> bool:
        if not self.settings.logmeal_api_key:
            return False
        if self.auth_mode is AuthMode.USER_TOKEN_ENV:
            return bool(self.settings.logmeal_user_token)
        return True

    def _post(self, path: str, **kwargs) -> requests.Response:
        try:
            return self.session.post(
                self.base_url + path, timeout=self.settings.recognition_timeout, **kwargs
            )
        except requests.RequestException as e:
            log.error("Recognition request to %s failed: %s", path, e)
            raise RecognitionError(f"recognition service unreachable: {e}") from e

    def _create_user_token(self) -> str:
        resp = self._post(
            SIGNUP_PATH,
            headers={"Authorization": f"Bearer {self.settings.logmeal_api_key}"},
            json={"username": self.settings.logmeal_username, "language": "eng"},
        )
        if not resp.ok:
            raise RecognitionError(
                f"could not create recognition user: HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        token = (self._json(resp) or {}).get("token")
        if not token:
            raise RecognitionError("recognition user sign-up returned no token")
        log.info("Created recognition API user %s", self.settings.logmeal_username)
        return token

    def _token(self) -> str:
        if not self.configured:
            raise RecognitionNotConfigured("recognition API key is not configured")
        if self.auth_mode is AuthMode.API_KEY:
            return self.settings.logmeal_api_key
        if self.auth_mode is AuthMode.USER_TOKEN_ENV:
            return self.settings.logmeal_user_token
        if self._user_token is None:
            self._user_token = self._create_user_token()
        return self._user_token

    @staticmethod
    def _json(resp: requests.Response):
        try:
            return resp.json()
        except ValueError as e:
            raise RecognitionError(
                "recognition service returned a non-JSON body", status_code=resp.status_code
            ) from e

    def detect(self, image: str, min_confidence: Optional[float] = None) -> List[Detection]:
        """Send a base64 image (optionally a data URL) and return detections."""
        if min_confidence is None:
            min_confidence = self.settings.recognition_min_confidence
        try:
            image_bytes = base64.b64decode(strip_data_url(image), validate=True)
        except (binascii.Error, ValueError) as e:
            raise RecognitionError("image is not valid base64", status_code=400) from e
        token = self._token()

        resp = self._post(
            SEGMENTATION_PATH,
            headers={"Authorization": f"Bearer {token}"},
            files={"image": ("image.jpg", image_bytes, "image/jpeg")},
        )
        log.info("Recognition service answered HTTP %d", resp.status_code)
        if resp.status_code == 429:
            raise RecognitionRateLimited()
        if not resp.ok:
            raise RecognitionError(
                f"recognition service error: HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        detections = parse_detections(self._json(resp), min_confidence)
        log.info("Recognition produced %d detection(s)", len(detections))
        return detections
