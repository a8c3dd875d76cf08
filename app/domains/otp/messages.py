"""User-facing (Hindi) messages returned by the API, keyed by result code."""

OTP_SMS_TEMPLATE = "आपका DS School OTP है: {code}\n\nयह {minutes} मिनट में समाप्त हो जाएगा।\n\n- DS Middle School"

MESSAGES = {
    "INVALID_MOBILE": "कृपया 10 अंकों का सही मोबाइल नंबर दर्ज करें",
    "MISSING_FIELDS": "मोबाइल नंबर और OTP दोनों आवश्यक हैं",
    "RATE_LIMITED": "कृपया नया OTP मांगने से पहले प्रतीक्षा करें",
    "OTP_NOT_FOUND": "OTP नहीं मिला या समय समाप्त",
    "OTP_EXPIRED": "OTP का समय समाप्त हो गया",
    "TOO_MANY_ATTEMPTS": "बहुत अधिक प्रयास",
    "OTP_MISMATCH": "गलत OTP",
    "IDENTITY_NOT_FOUND": "यह मोबाइल नंबर रजिस्टर नहीं है",
    "OTP_SENT": "OTP सफलतापूर्वक भेजा गया",
    "OTP_SENT_DEMO": "OTP भेजा गया (Demo Mode)",
    "OTP_SENT_DEMO_ERROR": "OTP भेजा गया (Demo Mode - Twilio Error)",
    "LOGIN_SUCCESS": "सफल लॉगिन",
    "LOGOUT_SUCCESS": "सफलतापूर्वक लॉगआउट",
    "USER_NOT_FOUND": "उपयोगकर्ता नहीं मिला",
    "PARENT_NOT_FOUND": "अभिभावक नहीं मिला",
    "CHILD_ADDED": "नया बच्चा सफलतापूर्वक जोड़ा गया",
    "INVALID_REQUEST": "अमान्य अनुरोध",
    "NOT_FOUND": "API endpoint नहीं मिला",
    "SERVER_ERROR": "सर्वर त्रुटि",
}


def for_code(code: str) -> str:
    return MESSAGES.get(code, MESSAGES["SERVER_ERROR"])


def otp_sms(code: str, ttl_seconds: int) -> str:
    return OTP_SMS_TEMPLATE.format(code=code, minutes=ttl_seconds // 60)
