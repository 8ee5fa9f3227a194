"""Authentication and profile routes.

Endpoints:
- POST /api/auth/register: Create account, return user + token
- POST /api/auth/login: Verify credentials, return user + token
- GET /api/auth/profile: Current user's profile
- PUT|PATCH /api/auth/profile: Partial profile update
- POST /api/auth/change-password: Replace password
- POST /api/auth/logout: Acknowledge logout (tokens are stateless)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_repo
from api.models import (
    AuthData,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserData,
    UserResponse,
)
from api.security import create_access_token, get_current_user_id
from domain.model.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

_STATUS_BY_ERROR = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}


def _http_error(error: DomainError, fallback: str) -> HTTPException:
    """Map a domain error to an HTTPException; anything unmapped becomes a generic 500."""
    status_code = _STATUS_BY_ERROR.get(type(error))
    if status_code is None:
        logger.error(fallback, extra={"error": str(error), "errorType": type(error).__name__})
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)
    return HTTPException(status_code=status_code, detail=str(error))


# Handlers are sync so FastAPI runs them in its threadpool; bcrypt is CPU-bound.

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user and issue a token.

    Raises:
        HTTPException: 400 missing fields, 409 email taken, 500 unexpected failure
    """
    fallback = "Internal server error during registration"
    try:
        user = auth_service.register(
            repo,
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        token = create_access_token(user)
    except DomainError as e:
        raise _http_error(e, fallback)
    except Exception:
        logger.exception("Registration error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)

    logger.info("User registered", extra={"userId": user.id, "email": user.email})

    return AuthResponse(
        message="User registered successfully",
        data=AuthData(user=UserResponse.from_domain(user), token=token),
    )


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, repo: UserRepository = Depends(get_user_repo)):
    """Login user and return a fresh token.

    Raises:
        HTTPException: 400 missing fields, 401 bad credentials or deactivated account
    """
    fallback = "Internal server error during login"
    try:
        user = auth_service.authenticate(repo, email=request.email, password=request.password)
        token = create_access_token(user)
    except DomainError as e:
        raise _http_error(e, fallback)
    except Exception:
        logger.exception("Login error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)

    logger.info("User logged in", extra={"userId": user.id})

    return AuthResponse(
        message="Login successful",
        data=AuthData(user=UserResponse.from_domain(user), token=token),
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    repo: UserRepository = Depends(get_user_repo),
):
    fallback = "Internal server error"
    try:
        user = auth_service.get_profile(repo, user_id)
    except DomainError as e:
        raise _http_error(e, fallback)
    except Exception:
        logger.exception("Get profile error", extra={"userId": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)

    return ProfileResponse(data=UserData(user=UserResponse.from_domain(user)))


@router.api_route("/profile", methods=["PUT", "PATCH"], response_model=ProfileUpdateResponse)
def update_profile(
    request: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    repo: UserRepository = Depends(get_user_repo),
):
    """Update first/last name. Fields left out of the body are not touched."""
    # null is treated like an absent field
    changes = {
        k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None
    }

    fallback = "Internal server error"
    try:
        user = auth_service.update_profile(repo, user_id, **changes)
    except DomainError as e:
        raise _http_error(e, fallback)
    except Exception:
        logger.exception("Update profile error", extra={"userId": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)

    logger.info("Profile updated", extra={"userId": user_id, "fields": sorted(changes)})

    return ProfileUpdateResponse(
        message="Profile updated successfully",
        data=UserData(user=UserResponse.from_domain(user)),
    )


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: ChangePasswordRequest,
    user_id: str = Depends(get_current_user_id),
    repo: UserRepository = Depends(get_user_repo),
):
    fallback = "Internal server error"
    try:
        auth_service.change_password(
            repo,
            user_id,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    except DomainError as e:
        raise _http_error(e, fallback)
    except Exception:
        logger.exception("Change password error", extra={"userId": user_id})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)

    logger.info("Password changed", extra={"userId": user_id})

    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
def logout():
    """Acknowledge logout. The client discards its token; nothing is revoked server-side."""
    return MessageResponse(message="Logout successful")
