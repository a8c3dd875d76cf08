from fastapi import Request, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials


class JWTAuthMiddleware(HTTPBearer):
    def __init__(self):
        super(JWTAuthMiddleware, self).__init__()

    async def __call__(self, request: Request) -> str:
        credentials: HTTPAuthorizationCredentials = await super(JWTAuthMiddleware, self).__call__(request)

        if not credentials:
            raise HTTPException(status_code=403, detail="Invalid authorization code.")

        jwt_service = request.app.state.jwt_service
        mobile = jwt_service.verify_token(credentials.credentials)
        if not mobile:
            raise HTTPException(status_code=401, detail="Invalid token or expired token.")

        request.state.token = credentials.credentials
        return mobile


jwt_auth = JWTAuthMiddleware()


def ensure_owner(mobile: str, caller_mobile: str) -> None:
    """A parent may only read or modify their own records."""
    if mobile != caller_mobile:
        raise HTTPException(status_code=403, detail="Unauthorized access to this resource.")
