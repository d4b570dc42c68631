"""
School REST gateway.

FastAPI application that mounts the school resource routes and optionally
authenticates callers against Firebase Admin, plus the diagnostics used to
verify a Firebase setup.
"""
