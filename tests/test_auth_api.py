from datetime import datetime, timedelta, timezone

from backoffice.application.services.token_service import TokenService

REGISTER_BODY = {
    "firstName": "Alice",
    "lastName": "Smith",
    "email": "alice@example.com",
    "phone": "+1 555 123 4567",
    "password": "secret123",
}


def _otp_from(notifier):
    return notifier.last("otp").body.split("code is: ")[1].split("\n")[0]


def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["auth"]["secret_key_configured"] is True


def test_register_returns_201_and_sends_code(client, notifier):
    resp = client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 201
    assert resp.json()["email"] == "alice@example.com"
    assert "message" in resp.json()
    otp = notifier.last("otp")
    assert otp.email == "alice@example.com"
    assert otp.phone == "+15551234567"


def test_register_duplicate_is_400(client):
    client.post("/auth/register", json=REGISTER_BODY)
    resp = client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Admin with this email already exists"}


def test_register_validation_error_is_400_with_message(client):
    resp = client.post("/auth/register", json={**REGISTER_BODY, "email": "not-an-email", "password": "123"})
    assert resp.status_code == 400
    assert "email" in resp.json()["message"]


def test_full_account_lifecycle(client, notifier):
    client.post("/auth/register", json=REGISTER_BODY)

    # unverified accounts cannot log in
    resp = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Please verify your account first"

    resp = client.post("/auth/verify-otp", json={"email": "alice@example.com", "otpCode": _otp_from(notifier)})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token"]
    assert body["admin"] == {"id": 1, "firstName": "Alice", "lastName": "Smith", "email": "alice@example.com"}

    resp = client.post("/auth/login", json={"email": "Alice@Example.com", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["token"]

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["admin"]["email"] == "alice@example.com"

    resp = client.post("/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully"}


def test_verify_otp_wrong_code_is_400(client):
    client.post("/auth/register", json=REGISTER_BODY)
    resp = client.post("/auth/verify-otp", json={"email": "alice@example.com", "otpCode": "000000"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid OTP code"}


def test_verify_otp_unknown_email_is_404(client):
    resp = client.post("/auth/verify-otp", json={"email": "ghost@example.com", "otpCode": "123456"})
    assert resp.status_code == 404


def test_login_errors_do_not_reveal_accounts(client, register_and_verify):
    register_and_verify(email="alice@example.com", password="secret123")
    wrong = client.post("/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})
    unknown = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid email or password"}


def test_resend_otp(client, notifier):
    client.post("/auth/register", json=REGISTER_BODY)
    first = _otp_from(notifier)
    resp = client.post("/auth/resend-otp", json={"email": "alice@example.com"})
    assert resp.status_code == 200
    assert len(notifier.sent) == 2

    latest = _otp_from(notifier)
    resp = client.post("/auth/verify-otp", json={"email": "alice@example.com", "otpCode": latest})
    assert resp.status_code == 200
    if first != latest:
        resp = client.post("/auth/verify-otp", json={"email": "alice@example.com", "otpCode": first})
        assert resp.status_code == 400


def test_resend_otp_unknown_email_is_404(client):
    resp = client.post("/auth/resend-otp", json={"email": "ghost@example.com"})
    assert resp.status_code == 404


def test_resend_otp_rate_limited(client, settings):
    client.post("/auth/register", json=REGISTER_BODY)
    for _ in range(settings.OTP_RATE_LIMIT_MAX_REQUESTS):
        assert client.post("/auth/resend-otp", json={"email": "alice@example.com"}).status_code == 200
    resp = client.post("/auth/resend-otp", json={"email": "alice@example.com"})
    assert resp.status_code == 429


def test_forgot_and_reset_password(client, notifier, register_and_verify):
    register_and_verify(email="alice@example.com", password="secret123")

    known = client.post("/auth/forgot-password", json={"email": "alice@example.com"})
    unknown = client.post("/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()

    token = notifier.last("reset_password").body.split("token=")[1].split()[0]
    resp = client.post("/auth/reset-password", json={"token": token, "password": "newpass456"})
    assert resp.status_code == 200

    resp = client.post("/auth/reset-password", json={"token": token, "password": "another789"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid or expired reset token"}

    assert client.post("/auth/login", json={"email": "alice@example.com", "password": "newpass456"}).status_code == 200
    assert client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"}).status_code == 401


def test_protected_route_without_token_is_401(client):
    resp = client.get("/auth/me")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Access token required"}


def test_protected_route_with_bad_token_is_403(client):
    resp = client.get("/tracks", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 403
    assert resp.json() == {"message": "Invalid or expired token"}


def test_protected_route_with_expired_token_is_403(client, settings, register_and_verify):
    register_and_verify()
    issued = datetime.now(timezone.utc) - timedelta(days=8)
    token = TokenService(settings, clock=lambda: issued).issue(1)
    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_token_for_missing_admin_is_401(client, settings):
    token = TokenService(settings).issue(999)
    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid token"}


def test_security_headers_present(client):
    resp = client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_register_retry_after_dispatch_failure(app, client, notifier):
    from backoffice.exceptions import NotificationError

    class DownNotifier:
        async def send(self, notification):
            raise NotificationError("smtp down")

    app.state.notification_sender = DownNotifier()
    resp = client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 500

    app.state.notification_sender = notifier
    resp = client.post("/auth/register", json=REGISTER_BODY)
    assert resp.status_code == 201
    assert notifier.last("otp").email == "alice@example.com"
