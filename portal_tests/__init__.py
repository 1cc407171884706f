"""
Portal test suites package.

Kept importable so that:
  - page objects and framework modules resolve as `portal_tests.ui_testing...`
  - `run_tests.py` and CI jobs can import the settings loader
  - unit tests can share the in-memory driver

Browser tests target the public Ecommerce Practice Portal; no secrets live here.
"""
