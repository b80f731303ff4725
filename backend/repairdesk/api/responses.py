"""
Download responses for the admin exports.
"""
import re
from urllib.parse import quote

from fastapi import Response


# Header values travel as latin-1; anything outside printable ASCII, and the
# characters that would end the quoted string, are replaced in `filename=`
_UNSAFE_FILENAME_CHARS = re.compile(r'[^\x20-\x7e]|["\\]')


def content_disposition(filename: str) -> str:
    """
    Attachment header with an ASCII fallback name and the exact UTF-8 name
    (RFC 6266 / RFC 5987).
    """
    fallback = _UNSAFE_FILENAME_CHARS.sub("_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": content_disposition(filename)},
    )
