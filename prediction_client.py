import logging
from dataclasses import dataclass, field

import requests

from errors import PredictionServiceError

REQUIRED_FIELDS = ('prediction', 'confidence', 'message')


@dataclass(frozen=True)
class PredictionMode:
    """How one prediction flow talks to the service and what its result page shows"""
    name: str
    endpoint: str
    location_field: str
    # Fixed stand-in figures for the result page, not sensor readings
    display: dict = field(default_factory=dict)


PREDICTION_MODES = {
    'expert': PredictionMode(
        name='expert',
        endpoint='predict-expert',
        location_field='city',
        display={
            'weather': {'temp': 28, 'humidity': 50, 'description': 'Auto'},
        },
    ),
    'basic': PredictionMode(
        name='basic',
        endpoint='predict-basic',
        location_field='district',
        display={
            'weather': {'temp': 30, 'humidity': 40, 'description': 'Auto'},
            'ph': 7,
            'nitrogen': 50,
            'phosphorus': 30,
            'potassium': 20,
        },
    ),
}


class PredictionClient:
    """HTTP client for the external crop prediction service"""

    def __init__(self, base_url, timeout=5.0, http=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = http or requests.Session()
        self.logger = logging.getLogger(__name__)

    def url_for(self, mode):
        return f"{self.base_url}/{PREDICTION_MODES[mode].endpoint}"

    def predict(self, mode, payload):
        """
        Forward a submitted form to the prediction service

        Args:
            mode (str): 'expert' or 'basic'
            payload (dict): form fields, sent as the JSON request body

        Returns:
            dict: prediction, confidence and message from the service

        Raises:
            PredictionServiceError: on connection failure, timeout, non-2xx
            status or a response missing any of the required fields
        """
        if mode not in PREDICTION_MODES:
            raise ValueError(f"Unknown prediction mode: {mode}")

        url = self.url_for(mode)
        try:
            response = self.http.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            self.logger.error(f"Prediction service timed out after {self.timeout}s ({url}): {e}")
            raise PredictionServiceError(mode, 'timeout') from e
        except requests.JSONDecodeError as e:
            self.logger.error(f"Prediction service returned non-JSON body ({url}): {e}")
            raise PredictionServiceError(mode, 'invalid JSON') from e
        except requests.RequestException as e:
            self.logger.error(f"Prediction service request failed ({url}): {e}")
            raise PredictionServiceError(mode, str(e)) from e

        if not isinstance(data, dict):
            self.logger.error(f"Prediction service returned {type(data).__name__}, expected object")
            raise PredictionServiceError(mode, 'unexpected response shape')

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            self.logger.error(f"Prediction service response missing fields: {missing}")
            raise PredictionServiceError(mode, f"missing fields: {', '.join(missing)}")

        self.logger.info(f"Prediction received for mode {mode}: {data['prediction']}")
        return {name: data[name] for name in REQUIRED_FIELDS}

    def close(self):
        self.http.close()
