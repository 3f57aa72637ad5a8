from fastapi import Response, status

from .models import MessageResponse


async def default_root_handler() -> MessageResponse:
    return MessageResponse()


async def no_content_handler() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
