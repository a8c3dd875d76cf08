import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.domains.auth.middleware import ensure_owner, jwt_auth
from app.domains.otp import messages
from app.domains.parents.models import ChildCreate
from app.shared.phone_utils import mask_phone

router = APIRouter(tags=["parents"])


class AddChildRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    parent_mobile: str
    child_data: ChildCreate


def _not_found(code: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "message": messages.for_code(code)})


@router.get("/children/{mobile}")
def get_children(mobile: str, request: Request, caller: str = Depends(jwt_auth)):
    logging.info("Fetching children for mobile: %s", mask_phone(mobile))
    ensure_owner(mobile, caller)

    identity = request.app.state.identity_store.lookup(mobile)
    if identity is None:
        return _not_found("USER_NOT_FOUND")

    return {
        "success": True,
        "children": [child.model_dump(by_alias=True) for child in identity.children],
        "parent": {"name": identity.name, "mobile": identity.mobile},
    }


@router.post("/add-child")
def add_child(request_data: AddChildRequest, request: Request, caller: str = Depends(jwt_auth)):
    logging.info("Adding child for parent: %s", mask_phone(request_data.parent_mobile))
    ensure_owner(request_data.parent_mobile, caller)

    identity = request.app.state.identity_store.append_child(request_data.parent_mobile, request_data.child_data)
    if identity is None:
        return _not_found("PARENT_NOT_FOUND")

    child = identity.children[-1]

    return {
        "success": True,
        "message": messages.for_code("CHILD_ADDED"),
        "child": child.model_dump(by_alias=True),
    }
