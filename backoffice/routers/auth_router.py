import logging

from fastapi import APIRouter, Depends

from ..application.ports.credential_store import AccountDto, RegistrationData
from ..application.services.account_service import AccountService, SessionResult
from ..dependencies import get_account_service, get_current_admin
from ..schemas import (
    RegisterRequest, RegisterResponse, VerifyOTPRequest, LoginRequest,
    ResendOTPRequest, ForgotPasswordRequest, ResetPasswordRequest,
    AdminResponse, AuthResponse, MeResponse, MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(message: str, result: SessionResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=result.token,
        admin=AdminResponse.model_validate(result.account),
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(payload: RegisterRequest, service: AccountService = Depends(get_account_service)):
    """Create an unverified admin and send the verification code."""
    account = await service.register(RegistrationData(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        phone=payload.phone,
        password=payload.password,
    ))
    return RegisterResponse(
        message="Admin registered successfully. Please check your email for verification code.",
        email=account.email,
    )


@router.post("/verify-otp", response_model=AuthResponse)
def verify_otp(payload: VerifyOTPRequest, service: AccountService = Depends(get_account_service)):
    result = service.verify_otp(payload.email, payload.otp_code)
    return _auth_response("Account verified successfully", result)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, service: AccountService = Depends(get_account_service)):
    result = service.login(payload.email, payload.password)
    return _auth_response("Login successful", result)


@router.post("/resend-otp", response_model=MessageResponse)
async def resend_otp(payload: ResendOTPRequest, service: AccountService = Depends(get_account_service)):
    await service.resend_otp(payload.email)
    return MessageResponse(message="New OTP sent successfully")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(payload: ForgotPasswordRequest, service: AccountService = Depends(get_account_service)):
    """Always answers with the same message so callers cannot probe for accounts."""
    message = await service.forgot_password(payload.email)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, service: AccountService = Depends(get_account_service)):
    service.reset_password(payload.token, payload.password)
    return MessageResponse(message="Password reset successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(admin: AccountDto = Depends(get_current_admin)):
    # Tokens are stateless; the client discards its copy
    logger.info(f"Admin {admin.id} logged out")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=MeResponse)
def me(admin: AccountDto = Depends(get_current_admin)):
    return MeResponse(admin=AdminResponse.model_validate(admin))
