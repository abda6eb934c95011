from fastapi import HTTPException, Request, status


def _error_payload(code: str, message: str, details: dict) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
        }
    }


def require_client_phone(request: Request) -> str:
    phone = (request.headers.get("x-client-phone") or "").strip()
    if not phone:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_error_payload(
                "UNAUTHORIZED",
                "Missing or invalid client context.",
                {"required_header": "x-client-phone"},
            ),
        )
    return phone
