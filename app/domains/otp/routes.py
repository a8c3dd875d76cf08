import logging
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from app.domains.otp import messages
from app.domains.otp.models import Failed, Fallback
from app.shared.phone_utils import mask_phone

router = APIRouter()


class SendOTPRequest(BaseModel):
    mobile: Optional[str] = None


class VerifyOTPRequest(BaseModel):
    mobile: Optional[str] = None
    otp: Optional[str] = None


@router.post("/send-otp")
def send_otp(request_data: SendOTPRequest, request: Request):
    """
    Endpoint to send OTP.
    """
    logging.info("OTP request for mobile: %s", mask_phone(request_data.mobile or ""))
    otp_service = request.app.state.otp_service
    result = otp_service.send_otp(request_data.mobile)

    delivery = result.delivery
    if isinstance(delivery, Fallback):
        return {
            "success": True,
            "message": messages.for_code("OTP_SENT_DEMO"),
            "demo": True,
            "otp": delivery.code,
        }
    if isinstance(delivery, Failed):
        return {
            "success": True,
            "message": messages.for_code("OTP_SENT_DEMO_ERROR"),
            "demo": True,
            "otp": delivery.code,
            "error": delivery.reason,
        }
    return {
        "success": True,
        "message": messages.for_code("OTP_SENT"),
        "messageSid": delivery.delivery_id,
    }


@router.post("/verify-otp")
def verify_otp(request_data: VerifyOTPRequest, request: Request):
    """
    Endpoint to verify OTP and log the parent in.
    """
    logging.info("OTP verification for mobile: %s", mask_phone(request_data.mobile or ""))
    otp_service = request.app.state.otp_service
    result = otp_service.verify_otp(request_data.mobile, request_data.otp)

    return {
        "success": True,
        "message": messages.for_code("LOGIN_SUCCESS"),
        "user": result.identity.model_dump(by_alias=True),
        "token": result.session.token,
        "expiresAt": int(result.session.expires_at),
    }
