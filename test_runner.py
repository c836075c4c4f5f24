#!/usr/bin/env python3
"""
Run the Movie Night tests.

Usage:
    python test_runner.py              - all test modules
    python test_runner.py sheet_store  - tests/test_sheet_store.py only
    python test_runner.py --deps       - check third-party packages
"""

import importlib
import os
import sys
import unittest

ROOT = os.path.dirname(os.path.abspath(__file__))
TESTS_DIR = os.path.join(ROOT, 'tests')

sys.path.insert(0, os.path.join(ROOT, 'src'))
sys.path.insert(0, TESTS_DIR)

# Distribution name -> import name
REQUIRED_PACKAGES = [
    ('streamlit', 'streamlit'),
    ('pandas', 'pandas'),
    ('gspread', 'gspread'),
    ('google-auth', 'google.oauth2'),
    ('tmdbv3api', 'tmdbv3api'),
]


def check_dependencies():
    missing = []
    for package_name, import_name in REQUIRED_PACKAGES:
        try:
            importlib.import_module(import_name)
        except ImportError:
            missing.append(package_name)

    if missing:
        print(f"Missing packages: {', '.join(missing)}")
        print("Install with: pip install -e .[test]")
        return False
    return True


def available_modules():
    return sorted(
        name[len('test_'):-len('.py')]
        for name in os.listdir(TESTS_DIR)
        if name.startswith('test_') and name.endswith('.py')
    )


def build_suite(module_name=None):
    loader = unittest.TestLoader()
    if module_name is None:
        return loader.discover(TESTS_DIR, pattern='test_*.py')
    return loader.loadTestsFromName(f'test_{module_name}')


def main(argv):
    if argv and argv[0] == '--deps':
        return check_dependencies()

    if not check_dependencies():
        return False

    module_name = argv[0] if argv else None
    if module_name is not None and module_name not in available_modules():
        print(f"No tests for '{module_name}'. Available: {', '.join(available_modules())}")
        return False

    result = unittest.TextTestRunner(verbosity=2).run(build_suite(module_name))
    return result.wasSuccessful()


if __name__ == "__main__":
    sys.exit(0 if main(sys.argv[1:]) else 1)
