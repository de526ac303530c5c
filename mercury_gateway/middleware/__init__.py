from .security_headers import SecurityHeadersMiddleware, install_security_headers

__all__ = ["SecurityHeadersMiddleware", "install_security_headers"]
