from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Optional

from smartfix.core.errors import AuthError, ValidationError
from smartfix.services.container import Container, get_container
from smartfix.services.validation import validate_credentials

router = APIRouter(prefix="/auth")


class SignInRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    email: str
    password: str
    confirm_password: Optional[str] = None


@router.post("/sign-in")
async def sign_in(req: SignInRequest, container: Container = Depends(get_container)):
    check = validate_credentials(req.email, req.password)
    if not check.ok:
        raise ValidationError(check.reason, check.message)

    try:
        user = await container.session.sign_in(container.auth, req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return {"user": user.model_dump()}


@router.post("/sign-up")
async def sign_up(req: SignUpRequest, container: Container = Depends(get_container)):
    # Confirmation is checked only when supplied
    check = validate_credentials(req.email, req.password, req.confirm_password)
    if not check.ok:
        raise ValidationError(check.reason, check.message)

    try:
        user = await container.auth.sign_up(req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {
        "user": user.model_dump() if user else None,
        "message": "Registration successful! Please check your email to verify your account.",
    }


@router.post("/sign-out")
async def sign_out(container: Container = Depends(get_container)):
    try:
        await container.session.sign_out(container.auth)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {"signed_in": False}


@router.get("/me")
async def me(container: Container = Depends(get_container)):
    user = container.session.user
    return {"signed_in": user is not None, "user": user.model_dump() if user else None}
