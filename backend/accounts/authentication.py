from rest_framework.authentication import SessionAuthentication


class SessionCookieAuthentication(SessionAuthentication):
    """
    Session-cookie authentication that answers 401 for anonymous callers.

    DRF downgrades ``NotAuthenticated`` to 403 when the first authenticator
    exposes no ``WWW-Authenticate`` challenge, which would make "not logged in"
    indistinguishable from "not allowed".
    """

    def authenticate_header(self, request):
        return 'Session realm="api"'
