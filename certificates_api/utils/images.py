import base64
import binascii
import logging
import re
from typing import Tuple

from certificates_api.core.exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"
DATA_URI_META = re.compile(r"^data:(.*?);base64$")


def _b64decode(data: str) -> bytes:
    data = "".join(data.split())
    # Stored payloads are not always padded
    data += "=" * (-len(data) % 4)
    return base64.b64decode(data)


def decode_image(image: str) -> Tuple[bytes, str]:
    """
    Decode a stored certificate image.

    Accepts either a data URI (data:<mime>;base64,<payload>) or a bare base64
    string. Returns (bytes, mime_type); bare strings and data URIs without a
    readable mime type are reported as image/png.
    """
    mime_type = DEFAULT_IMAGE_MIME_TYPE
    payload = image

    if "," in image:
        meta, payload = image.split(",", 1)
        match = DATA_URI_META.match(meta)
        if match and match.group(1):
            mime_type = match.group(1)

    try:
        return _b64decode(payload), mime_type
    except (binascii.Error, ValueError) as e:
        logger.error(f"Stored image is not valid base64: {str(e)}")
        raise ImageDecodeError()
