"""
FastAPI entry point for the stock dealer service.

This module is the Composition Root: it reads Settings, wires the infrastructure
adapters (JSON file repository, git branch mirror, Discord webhook notifier,
shared-secret validator) into the application use cases, and maps service
errors to HTTP responses of the form ``{"error": "..."}``.

Run locally:
    uvicorn src.infrastructure.entrypoints.fastapi_app:app --port 10000
or
    python -m src.infrastructure.entrypoints.fastapi_app
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import BackgroundTasks, Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from src.application.services.ledger_store import Clock, LedgerStore
from src.application.use_cases.execute_trade import ExecuteTradeUseCase
from src.application.use_cases.forward_report import ForwardReportUseCase
from src.application.use_cases.list_stocks import ListStocksUseCase
from src.domain.exceptions import (
    AuthenticationError,
    DealerServiceError,
    InvalidActionError,
    InvalidAmountError,
    InvalidRequestBodyError,
    InvalidStockNameError,
    ReportValidationError,
)
from src.domain.ports.key_validator_port import IKeyValidator
from src.domain.ports.ledger_repository_port import ILedgerRepository
from src.domain.ports.mirror_port import ILedgerMirror
from src.domain.ports.report_notifier_port import IReportNotifier
from src.infrastructure.auth.shared_secret_validator import SharedSecretValidator
from src.infrastructure.config.settings import Settings
from src.infrastructure.entrypoints.schemas import ErrorResponse, ReportRequest, StockView
from src.infrastructure.mirror.git_branch_mirror import GitBranchMirror, NullLedgerMirror
from src.infrastructure.notifications.discord_webhook import DiscordWebhookNotifier
from src.infrastructure.persistence.json_file_repository import JsonFileLedgerRepository

logger = logging.getLogger(__name__)

# Anything not listed is a server-side failure (500).
_STATUS_BY_ERROR: dict[type, int] = {
    AuthenticationError: 403,
    InvalidRequestBodyError: 400,
    InvalidStockNameError: 400,
    InvalidActionError: 400,
    InvalidAmountError: 400,
    ReportValidationError: 400,
}


def _status_for(exc: DealerServiceError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return 500


def build_mirror(settings: Settings) -> ILedgerMirror:
    if not settings.mirror_enabled:
        return NullLedgerMirror("GITHUB_TOKEN or GITHUB_REPO not set")
    return GitBranchMirror(
        repo_dir=settings.repo_dir,
        data_file=settings.data_file,
        token=settings.github_token,
        repository=settings.github_repo,
        branch=settings.mirror_branch,
        user_name=settings.git_user_name,
        user_email=settings.git_user_email,
    )


async def _read_json(request: Request) -> Any:
    """Parse the request body as JSON; an empty body reads as None."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise InvalidRequestBodyError() from exc


def create_app(
    settings: Optional[Settings] = None,
    *,
    repository: Optional[ILedgerRepository] = None,
    mirror: Optional[ILedgerMirror] = None,
    notifier: Optional[IReportNotifier] = None,
    validator: Optional[IKeyValidator] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Wire every dependency once and return the FastAPI app.

    Any adapter left as None is built from *settings*; tests pass fakes instead.
    """
    settings = settings or Settings.from_env()
    repository = repository or JsonFileLedgerRepository(settings.data_file)
    mirror = mirror or build_mirror(settings)
    validator = validator or SharedSecretValidator(settings.dealer_key)
    if notifier is None and settings.report_webhook_url:
        notifier = DiscordWebhookNotifier(settings.report_webhook_url)

    store = LedgerStore.from_document(repository.load(), clock=clock)
    logger.info("[LEDGER] Loaded %d stocks from %s", len(store), settings.data_file)

    trade_uc = ExecuteTradeUseCase(store, repository)
    list_uc = ListStocksUseCase(store)
    report_uc = ForwardReportUseCase(notifier, mention=settings.report_mention)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await run_in_threadpool(mirror.prepare)
        logger.info("Live on %d | branch %s", settings.port, settings.mirror_branch)
        yield

    app = FastAPI(title="Stock Dealer API", lifespan=lifespan)

    # ---------------------------------------------------------------------------
    # Error rendering
    # ---------------------------------------------------------------------------

    @app.exception_handler(DealerServiceError)
    async def handle_service_error(_request: Request, exc: DealerServiceError):
        return JSONResponse(
            status_code=_status_for(exc),
            content={"error": exc.message, **exc.extra()},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Server error"})

    # ---------------------------------------------------------------------------
    # Routes
    # ---------------------------------------------------------------------------

    async def require_dealer_key(x_dealer_key: Optional[str] = Header(default=None)) -> None:
        """FastAPI dependency: refuse the request unless x-dealer-key matches."""
        validator.validate(x_dealer_key)

    @app.get("/stocks", response_model=list[StockView])
    async def list_stocks():
        """Public read-only snapshot of every stock."""
        return list_uc.execute()

    @app.post(
        "/",
        response_model=StockView,
        responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
        dependencies=[Depends(require_dealer_key)],
    )
    async def trade(request: Request, background_tasks: BackgroundTasks):
        """Body: ["get" | "buy" | "sell", "<STOCKNAME>", "<AMOUNT>"]."""
        body = await _read_json(request)
        args = list(body) if isinstance(body, list) else []
        action, name, raw_amount = (args + [None, None, None])[:3]

        # No await between mutating the store and saving it
        result = trade_uc.execute(action, name, raw_amount)
        if result.persisted:
            background_tasks.add_task(mirror.sync)
        return result.stock

    @app.post(
        "/report",
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def report(request: Request):
        """Forward a moderation report to the configured webhook."""
        body = await _read_json(request)
        payload = ReportRequest.model_validate(body if isinstance(body, dict) else {})
        await report_uc.execute(payload.model_dump())
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_settings = Settings.from_env()
configure_logging(_settings.log_level)
app = create_app(_settings)


def main() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=_settings.port)


if __name__ == "__main__":
    main()
