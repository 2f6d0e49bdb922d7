from fastapi import HTTPException, Request, status
from jobboard.sessions import getSession

UNSAFE_METHODS = ("POST", "PUT", "DELETE")


async def verify_csrf(request: Request):
    """App-wide dependency checking the session's CSRF token on unsafe methods.

    Runs on the same ``Request`` the route receives, so a form parsed here
    is cached and read again by the route without touching the body.
    """
    if request.method not in UNSAFE_METHODS:
        return

    session_id = request.cookies.get("session_id")
    if not session_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Missing session")

    try:
        session = getSession(session_id=session_id)
    except HTTPException:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid session") from None

    expected_token = session.csrfToken

    # JSON clients send the token as a header, HTML forms as a field
    content_type = request.headers.get("content-type", "")
    actual_token = request.headers.get("x-csrf-token")
    if actual_token is None and content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        actual_token = form.get("_csrf")

    if actual_token != expected_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="CSRF token invalid or missing",
        )
