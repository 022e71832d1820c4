import logging

from fastapi import Depends, FastAPI, Header, HTTPException, status

from OptionGuard.core.config import GuardConfig, get_settings
from OptionGuard.core.errors import OptionUsageError
from OptionGuard.core.guard import OptionUsageGuard
from OptionGuard.core.models import CheckRequest, CheckResponse, OptionResponse, OptionWrite
from OptionGuard.core.store import OptionStore

logger = logging.getLogger("optionguard")
settings = get_settings()

app = FastAPI(title=settings.APP_NAME, version=settings.VERSION)

store = OptionStore()
guard = OptionUsageGuard(store, GuardConfig.from_settings(settings))
store.register(guard)


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    if x_api_key != settings.OPTIONGUARD_API_KEY:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    return x_api_key


def _violation_response(exc: OptionUsageError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"kind": exc.kind, "message": exc.message},
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.VERSION}


@app.post("/check", response_model=CheckResponse)
async def run_check(request: CheckRequest) -> CheckResponse:
    violations = guard.inspect(request.key, request.value, request.operation, autoload=request.autoload)
    verdict = "block" if violations else "allow"
    return CheckResponse(request_id=request.request_id, verdict=verdict, violations=violations)


@app.get("/options/{key}", response_model=OptionResponse)
async def read_option(key: str) -> OptionResponse:
    if not store.exists(key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Option '{key}' not found")
    return OptionResponse(key=key, value=store.get(key), changed=False)


@app.post("/options/{key}", response_model=OptionResponse)
async def add_option(key: str, body: OptionWrite, _: str = Depends(verify_api_key)) -> OptionResponse:
    if store.exists(key):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Option '{key}' already exists")
    autoload = True if body.autoload is None else body.autoload
    try:
        store.add(key, body.value, autoload=autoload)
    except OptionUsageError as exc:
        logger.info("Rejected add of %s: %s", key, exc)
        raise _violation_response(exc)
    return OptionResponse(key=key, value=store.get(key))


@app.put("/options/{key}", response_model=OptionResponse)
async def update_option(key: str, body: OptionWrite, _: str = Depends(verify_api_key)) -> OptionResponse:
    try:
        changed = store.update(key, body.value, autoload=body.autoload)
    except OptionUsageError as exc:
        logger.info("Rejected update of %s: %s", key, exc)
        raise _violation_response(exc)
    return OptionResponse(key=key, value=store.get(key), changed=changed)


@app.delete("/options/{key}")
async def delete_option(key: str, _: str = Depends(verify_api_key)) -> dict:
    if not store.delete(key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Option '{key}' not found")
    return {"key": key, "deleted": True}
