"""Recorded answer validation for the feedback request."""

import base64
import binascii
import logging
import re
from typing import Set

from interview_coach.core.config import settings
from interview_coach.core.exceptions import InvalidMediaError
from interview_coach.schemas.interview import InlineMedia

_DATA_URL_PATTERN = re.compile(r'^data:(.+?);base64,(.+)$', re.DOTALL)


class MediaValidator:
    """
    Validates recorded answer media sent by the browser.

    Responsibilities:
    - Split a data URL into MIME type and base64 payload
    - Verify the MIME type is a video/audio container Gemini accepts
    - Validate the base64 payload and its decoded size (configurable max)
    """

    VALID_MIME_PREFIXES: Set[str] = {'video/', 'audio/'}

    # Default max decoded size: 50MB
    MAX_MEDIA_SIZE_BYTES: int = 50 * 1024 * 1024

    def __init__(self, logger: logging.Logger = None, max_size_mb: int = None):
        """
        Initialize media validator.

        Args:
            logger: Logger instance (optional)
            max_size_mb: Maximum decoded media size in MB (optional, defaults to settings)
        """
        self.logger = logger or logging.getLogger(__name__)
        size_mb = max_size_mb if max_size_mb is not None else settings.MAX_VIDEO_SIZE_MB
        self.MAX_MEDIA_SIZE_BYTES = size_mb * 1024 * 1024

    def parse(self, data_url: str) -> InlineMedia:
        """
        Parse and validate a data URL.

        Args:
            data_url: 'data:[mimeType];base64,[data]'

        Returns:
            InlineMedia with the MIME type (codec parameters kept) and decoded payload.

        Raises:
            InvalidMediaError: If the URL is malformed, the type unsupported or the payload too large.
        """
        match = _DATA_URL_PATTERN.match(data_url or "")
        if not match:
            self.logger.error(f"Invalid data URL format: {(data_url or '')[:100]}")
            raise InvalidMediaError(
                "Invalid data URL format. Expected 'data:[mimeType];base64,[data]'"
            )
        mime_type, data = match.group(1), match.group(2)

        base_type = mime_type.split(';', 1)[0].strip().lower()
        if not any(base_type.startswith(prefix) for prefix in self.VALID_MIME_PREFIXES):
            raise InvalidMediaError(
                f"Unsupported media type: {base_type}",
                details={"mime_type": mime_type},
            )

        return InlineMedia(mime_type=mime_type, data=self._decode_payload(data))

    def _decode_payload(self, data: str) -> bytes:
        """
        Decode the base64 payload after checking it fits the size limit.

        Raises:
            InvalidMediaError: If decoding fails or the decoded size exceeds the limit
        """
        # Decoded size is 3/4 of the encoded length, minus padding
        decoded_size = (len(data) * 3) // 4 - data.count('=', -2)
        if decoded_size <= 0:
            raise InvalidMediaError("Recorded media is empty.")
        if decoded_size > self.MAX_MEDIA_SIZE_BYTES:
            max_mb = self.MAX_MEDIA_SIZE_BYTES / (1024 * 1024)
            actual_mb = decoded_size / (1024 * 1024)
            raise InvalidMediaError(
                f"Recorded media too large: {actual_mb:.1f}MB exceeds {max_mb:.0f}MB limit"
            )
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidMediaError(f"Recorded media is not valid base64: {e}") from e
