from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from employee_records.models.auth import LoginRequest, LoginResponse, UserInfo
from employee_records.services.user_service import InvalidPasswordError, UserNotFoundError, user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    try:
        email = await user_service.authenticate(request.email, request.password)
    except UserNotFoundError as err:
        logger.info("Login rejected: unknown user %s", request.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found") from err
    except InvalidPasswordError as err:
        logger.info("Login rejected: bad password for %s", request.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password") from err
    except Exception as err:
        logger.exception("Login failed for %s", request.email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(err)},
        ) from err

    return LoginResponse(user=UserInfo(email=email))
