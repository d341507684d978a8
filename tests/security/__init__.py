# tests/security/__init__.py
"""
Security-focused tests.

Security tests verify authentication, authorization, input validation,
and other security-critical aspects of the application.

Guidelines:
- Test authentication mechanisms
- Test authorization rules
- Test input validation and sanitization
- Test for common vulnerabilities (SQL injection, XSS, etc.)
- Test rate limiting and security headers
- Test secret handling
- Test CORS and CSRF protection

Common security test scenarios:
- Unauthorized access attempts
- Invalid token/API key handling
- Permission boundary testing
- Malicious input handling
- Session management
- Password/credential handling
"""
