"""Domain layer (pure logic).

- Keep pool naming, retention and codec rules here.
- Avoid I/O: no file access, no HTTP/FastAPI, no scheduler.
- Prefer deterministic functions (today's date is passed in as an argument).
"""
