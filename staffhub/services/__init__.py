"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services enforce business rules and state transitions, call repositories for
database work and raise ``staffhub.utils.exceptions`` errors. They never
commit; the router owns the transaction.
"""
