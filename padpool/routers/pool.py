import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import FileResponse, Response
from starlette.concurrency import run_in_threadpool

from padpool.errors import DecodeError, EncodeError, PoolNotFoundError
from padpool.models.dc_models import ConfigModel, KeyFileModel
from padpool.services.pool_service import PoolService

pool_router = APIRouter()


def get_pool_service(request: Request) -> PoolService:
    return request.app.state.pool_service


def not_found(e: PoolNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def content_disposition(file_name: str) -> str:
    """Attachment header for file_name, RFC 5987 encoded when it is not plain ASCII"""
    quoted = quote(file_name)
    if quoted != file_name:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{file_name}"'


class ConfigAPI:
    @staticmethod
    @pool_router.get("/config", response_model=ConfigModel)
    def get_config(service: PoolService = Depends(get_pool_service)):
        return service.public_config()


class PoolAPI:
    @staticmethod
    @pool_router.get("/download/{date}")
    def download_pool(date: str, service: PoolService = Depends(get_pool_service)):
        """Serve the raw bytes of the pool for date. Single mode ignores date."""
        logging.info(f"Request received for date {date}.")
        try:
            path = service.pool_file(date)
        except PoolNotFoundError as e:
            logging.info(f"Pool not found for date {date}.")
            raise not_found(e)
        return FileResponse(path, media_type="application/octet-stream", filename=path.name)


class KeyAPI:
    @staticmethod
    @pool_router.post("/encode", response_model=KeyFileModel)
    async def encode_file(
        request: Request,
        file_name: str = Query(..., min_length=1),
        service: PoolService = Depends(get_pool_service),
    ):
        """Encode the request body against today's pool and return the key"""
        data = await request.body()
        try:
            key = await run_in_threadpool(service.encode_file, file_name, data)
        except PoolNotFoundError as e:
            raise not_found(e)
        except EncodeError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return key

    @staticmethod
    @pool_router.post("/decode")
    async def decode_key(key: KeyFileModel, service: PoolService = Depends(get_pool_service)):
        """Reconstruct the file described by the key"""
        try:
            file_name, data = await run_in_threadpool(service.decode_key, key)
        except PoolNotFoundError as e:
            logging.info(f"Pool for key dated {key.date} not found. The key has likely expired.")
            raise not_found(e)
        except DecodeError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        return Response(
            content=data,
            media_type="application/octet-stream",
            headers={"Content-Disposition": content_disposition(file_name)},
        )
