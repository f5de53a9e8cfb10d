"""HTTP surface of the payment gateway.

A single handler serves two POST routes selected by the final path segment
of the URL (`create-order`, `capture-payment`), so the gateway can be
mounted under any prefix. Every response carries permissive cross-origin
headers; OPTIONS on any path is answered directly with 204.
"""

from time import perf_counter
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from crowdpay.common.config import settings
from crowdpay.common.logging import campaign_id_ctx, configure_logging, logger, order_id_ctx, trace_id_ctx
from crowdpay.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from crowdpay.common.startup import log_startup_config, warn_missing_credentials
from crowdpay.common.tracing import instrument_app, setup_tracing
from crowdpay.services.payment_gateway.schemas import (
    CAPTURE_PAYMENT_REQUIRED,
    CREATE_ORDER_REQUIRED,
    OrderCaptureRequest,
    OrderCreationRequest,
)
from crowdpay.services.payment_gateway.service import PaymentGatewayService, ProviderConfig, ProviderError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
GATEWAY_ROUTES = {"create-order", "capture-payment"}

configure_logging(settings.log_level)
setup_tracing(settings.service_name)
log_startup_config(
    settings.service_name,
    ["SERVICE_NAME", "LOG_LEVEL", "PAYPAL_CLIENT_ID", "PAYPAL_CLIENT_SECRET", "PAYPAL_TIMEOUT_SECONDS"],
)
warn_missing_credentials(settings.paypal_client_id, settings.paypal_client_secret)
service = PaymentGatewayService(ProviderConfig.from_settings(settings), service_name=settings.service_name)

app = FastAPI(title="Crowdpay Payment Gateway")
instrument_app(app)


def get_gateway() -> PaymentGatewayService:
    """Gateway service dependency; overridden in tests with a stubbed provider."""

    return service


def _json(status_code: int, content) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def _not_found() -> JSONResponse:
    return _json(404, {"error": "Not found"})


@app.middleware("http")
async def cors_and_metrics_middleware(request: Request, call_next):
    """Answer preflights, stamp CORS headers and record request metrics."""

    start = perf_counter()
    segment = request.url.path.split("/")[-1]
    route = segment if segment in GATEWAY_ROUTES | {"health", "metrics"} else "other"
    method = request.method
    status_code = 500
    try:
        if method == "OPTIONS":
            response = Response(status_code=204, headers=CORS_HEADERS)
        else:
            response = await call_next(request)
            for name, value in CORS_HEADERS.items():
                response.headers.setdefault(name, value)
        status_code = response.status_code
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException):
    """Unmatched paths and methods share the gateway's 404 body."""

    if exc.status_code in (404, 405):
        return _not_found()
    return _json(exc.status_code, {"error": str(exc.detail)})


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


async def _read_body(request: Request) -> dict:
    # A body that is not a JSON object reads as empty and fails validation.
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


async def create_order(request: Request, gateway: PaymentGatewayService) -> JSONResponse:
    body = await _read_body(request)
    try:
        req = OrderCreationRequest.model_validate(body)
    except ValidationError as exc:
        logger.info("create_order rejected errors=%s", exc.errors(include_url=False, include_input=False))
        return _json(400, {"error": CREATE_ORDER_REQUIRED})

    campaign_id_ctx.set(req.campaign_id)
    order = await gateway.create_order(req.amount, req.campaign_id)
    return _json(200, order)


async def capture_payment(request: Request, gateway: PaymentGatewayService) -> JSONResponse:
    body = await _read_body(request)
    try:
        req = OrderCaptureRequest.model_validate(body)
    except ValidationError as exc:
        logger.info("capture_payment rejected errors=%s", exc.errors(include_url=False, include_input=False))
        return _json(400, {"error": CAPTURE_PAYMENT_REQUIRED})

    campaign_id_ctx.set(req.campaign_id)
    order_id_ctx.set(req.order_id)
    capture = await gateway.capture_payment(req.order_id)
    # Recording the donation and bumping the campaign total is the caller's job.
    logger.info("capture returned to caller user_id=%s", req.user_id)
    return _json(200, capture)


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"])
async def process_payment(path: str, request: Request, gateway: PaymentGatewayService = Depends(get_gateway)):
    """Dispatch POSTs on the final path segment; everything else is 404."""

    trace_id_ctx.set(request.headers.get("x-correlation-id") or str(uuid4()))
    segment = path.split("/")[-1]
    if request.method != "POST" or segment not in GATEWAY_ROUTES:
        return _not_found()

    try:
        if segment == "create-order":
            return await create_order(request, gateway)
        return await capture_payment(request, gateway)
    except ProviderError as exc:
        return _json(500, {"error": str(exc)})
    except Exception:
        logger.exception("unexpected gateway failure route=%s", segment)
        return _json(500, {"error": "Internal server error"})
