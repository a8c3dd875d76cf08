from fastapi import APIRouter, Depends, Request

from app.domains.auth.middleware import jwt_auth
from app.domains.otp import messages

router = APIRouter(tags=["auth"])


@router.post("/logout")
def logout(request: Request, mobile: str = Depends(jwt_auth)):
    jwt_service = request.app.state.jwt_service
    jwt_service.revoke(request.state.token)
    return {"success": True, "message": messages.for_code("LOGOUT_SUCCESS")}
