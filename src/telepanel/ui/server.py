"""FastAPI 采集端：把请求的查询串转成一条记录投递到路由通道。"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from telepanel.core.channel import SenderSlot
from telepanel.errors import IngestError

logger = logging.getLogger(__name__)

INGEST_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(slot: SenderSlot) -> FastAPI:
    """构建采集应用；路径被忽略，只读取查询串。"""

    app = FastAPI(title="telepanel", docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route("/{path:path}", methods=INGEST_METHODS, include_in_schema=False)
    async def append_records(request: Request, path: str) -> Response:
        record = list(request.query_params.multi_items())
        try:
            # 先取出发送端再等待，避免在挂起期间持有锁
            sender = slot.get()
            await sender.send(record)
        except IngestError as exc:
            logger.warning("采集请求失败 /%s: %s", path, exc)
            return PlainTextResponse(str(exc), status_code=503)
        return Response(status_code=200)

    return app
