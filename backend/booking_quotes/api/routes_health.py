from fastapi import APIRouter, Request, Response

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request) -> dict[str, str]:
    app_settings = getattr(request.app.state, "app_settings", None)
    return {"status": "ok", "app": getattr(app_settings, "app_name", "booking-quotes")}


@router.head("/healthz")
async def healthz_head() -> Response:
    return Response(status_code=200)
