"""
Account routes: sign-up, sign-in, change-password, sign-out.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_authenticator, get_current_user, get_provisioner
from core.authenticator import Authenticator
from core.provisioner import AccountProvisioner
from database.models import User
from utils.schemas import (
    ChangePasswordRequest,
    SignedInEnvelope,
    SignInRequest,
    SignUpRequest,
    UserEnvelope,
    project_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/sign-up", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def sign_up(
    req: SignUpRequest,
    provisioner: AccountProvisioner = Depends(get_provisioner),
) -> Dict[str, Any]:
    """Create a user with its character, store and to-do list."""
    account = await provisioner.sign_up(req.credentials, req.character, req.todo)
    return {
        "user": project_user(
            account.user,
            character=account.character,
            store=account.store,
            todo=account.todo,
        ),
    }


@router.post("/sign-in", response_model=SignedInEnvelope, status_code=status.HTTP_201_CREATED)
async def sign_in(
    req: SignInRequest,
    authenticator: Authenticator = Depends(get_authenticator),
) -> Dict[str, Any]:
    result = await authenticator.sign_in(req.credentials.email, req.credentials.password)
    user = result.user
    payload = project_user(
        user,
        character=user.player_character,
        store=user.player_store,
        todo=user.player_todo,
    )
    payload["token"] = result.token
    return {"user": payload}


@router.patch("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    authenticator: Authenticator = Depends(get_authenticator),
) -> Response:
    await authenticator.change_password(user, req.passwords.old, req.passwords.new)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    user: User = Depends(get_current_user),
    authenticator: Authenticator = Depends(get_authenticator),
) -> Response:
    await authenticator.sign_out(user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
