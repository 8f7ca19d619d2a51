from fastapi import APIRouter, Request

router = APIRouter()

RELAY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@router.api_route("/{path:path}", methods=RELAY_METHODS)
async def proxy(path: str, request: Request):
    """
    Hands every path and method to the relay handler.
    Method gating and CORS are the handler's job, not the router's.
    """
    return await request.app.state.relay_handler.handle(request)
