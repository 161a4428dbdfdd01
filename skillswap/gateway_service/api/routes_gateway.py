from fastapi import APIRouter, Request, HTTPException, Response
import httpx
import logging

from skillswap import config

router = APIRouter()

logger = logging.getLogger("gateway")

# первый сегмент пути -> сервис
SERVICE_URLS = {
    "auth": config.USER_SERVICE_URL,
    "users": config.USER_SERVICE_URL,
    "courses": config.COURSE_SERVICE_URL,
    "progress": config.PROGRESS_SERVICE_URL,
    "matches": config.MATCH_SERVICE_URL,
    "notifications": config.MATCH_SERVICE_URL,
    "chat": config.CHAT_SERVICE_URL,
}

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=30.0)


async def _forward_async(method: str, url: str, request: Request) -> Response:
    headers = {}
    auth_header = request.headers.get("authorization")
    if auth_header:
        headers["authorization"] = auth_header
    content_type = request.headers.get("content-type")
    if content_type:
        headers["content-type"] = content_type

    body = await request.body()
    try:
        async with make_client() as client:
            resp = await client.request(
                method,
                url,
                headers=headers,
                params=list(request.query_params.multi_items()),
                content=body or None,
            )
    except httpx.RequestError as e:
        logger.error(f"Microservice unreachable at {url}: {e}")
        raise HTTPException(status_code=502, detail=f"Microservice unreachable: {str(e)}")

    return Response(
        content=resp.content,
        status_code=resp.status_code,
        media_type=resp.headers.get("content-type", "application/json")
    )


@router.api_route("/{service}", methods=METHODS)
@router.api_route("/{service}/{path:path}", methods=METHODS)
async def proxy(service: str, request: Request, path: str = ""):
    base_url = SERVICE_URLS.get(service)
    if not base_url:
        raise HTTPException(status_code=404, detail=f"Unknown service '{service}'")
    return await _forward_async(request.method, f"{base_url}/api/{service}/{path}", request)
