"""
Test suites package.

Kept importable so that:
  - page objects and framework helpers can be imported by the runner
  - unit tests can share the in-memory Playwright fakes
  - IDE navigation works across suites

No credentials live in this package; see env/.env.example.
"""
