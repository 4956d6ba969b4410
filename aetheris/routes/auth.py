from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from aetheris.services import auth
from aetheris.utils.session import current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/register")
async def register(request: Request, body: RegisterRequest) -> dict:
    if "@" not in body.email or len(body.password) < 6:
        raise HTTPException(status_code=400, detail="Check the email and password (min. 6 characters).")
    user_id = auth.create_user(body.email, body.password, body.name)
    request.session["user_id"] = user_id
    return {"success": True, "userId": user_id}


@router.post("/login")
async def login(request: Request, body: LoginRequest) -> dict:
    user = auth.authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user_id"] = user["id"]
    return {"success": True, "user": auth.public_user(user)}


@router.get("/me")
async def me(request: Request) -> dict:
    user = current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth.public_user(user)


@router.post("/logout")
async def logout(request: Request) -> dict:
    request.session.clear()
    return {"success": True}
