"""Service layer.

Use cases live in sub-packages and are imported from there directly:

- :mod:`app.services.session` — signup/signin/refresh/logout.
- :mod:`app.services.external_auth` — OAuth authorization-code flow and
  refresh-on-read of the provider token.
- :mod:`app.services.calendar` — calendar proxy over the provider token.

Shared primitives (errors, result type, ports, base service) live in
:mod:`app.services._shared`. This package deliberately re-exports nothing so
that low-level modules (``app.core.security``) can import the error types
without pulling the whole service graph.
"""
