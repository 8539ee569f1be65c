from fastapi import APIRouter, Depends, HTTPException, status

from jobtracker.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserOut
from jobtracker.services.errors import DuplicateEmailError, InvalidCredentialsError
from jobtracker.services.identity import IdentityService, get_identity_service
from jobtracker.services.repository import RepositoryUnavailableError

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    identity: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    try:
        user, token = await identity.register(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            role=payload.role,
        )
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return AuthResponse(message="user registered successfully", user=UserOut(**user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    identity: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    try:
        user, token = await identity.login(email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return AuthResponse(message="login successful", user=UserOut(**user), token=token)
