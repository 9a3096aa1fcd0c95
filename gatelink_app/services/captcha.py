"""
CAPTCHA verification against a reCAPTCHA-compatible siteverify endpoint.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

import requests

logger = logging.getLogger(__name__)


class CaptchaVerifier(ABC):
    """Checks a client-supplied CAPTCHA response token"""

    @abstractmethod
    def verify(self, token: Optional[str]) -> bool:
        """
        Returns:
            True only if the CAPTCHA service accepted the token
        """
        pass


class RecaptchaVerifier(CaptchaVerifier):
    """
    Posts the token and shared secret to the siteverify endpoint.

    Any transport or decoding failure counts as a rejection; the visitor
    stays on the last gate and can solve the CAPTCHA again.
    """

    def __init__(self, secret_key: Optional[str], verify_url: str, timeout: float = 10.0):
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.timeout = timeout

    def verify(self, token: Optional[str]) -> bool:
        if not token:
            return False
        if not self.secret_key:
            logger.error("CAPTCHA secret key is not configured, rejecting token")
            return False

        try:
            response = requests.post(
                self.verify_url,
                params={"secret": self.secret_key, "response": token},
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json().get("success") is True
        except (requests.RequestException, ValueError) as e:
            logger.error(f"CAPTCHA verification error: {e}")
            return False
