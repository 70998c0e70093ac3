"""Browser download delivery: turns a delivered export into an attachment response."""

from urllib.parse import quote

from fastapi import Response

from clinic.services.delivery import DeliveredFile


def content_disposition(filename: str) -> str:
    quoted: str = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


class HttpDelivery:
    """Captures one delivered file for the current request."""

    def __init__(self) -> None:
        self.file: DeliveredFile | None = None

    def deliver(self, content: bytes, filename: str, media_type: str) -> str:
        self.file = DeliveredFile(filename, media_type, content)
        return f"http:{filename}"

    def response(self, headers: dict[str, str] | None = None) -> Response:
        """Attachment response, or 204 when nothing was delivered."""
        extra: dict[str, str] = dict(headers or {})
        if self.file is None:
            return Response(status_code=204, headers=extra)
        extra["Content-Disposition"] = content_disposition(self.file.filename)
        return Response(
            content=self.file.content,
            media_type=self.file.media_type,
            headers=extra,
        )
