#!/usr/bin/env python
"""
Test runner script for the full suite
Usage: python run_tests.py [app_label ...]
"""
import os
import sys
import django
from django.conf import settings
from django.test.utils import get_runner

APPS = [
    'autoparts.core',
    'autoparts.catalog',
    'autoparts.parties',
    'autoparts.inventory',
    'autoparts.purchasing',
    'autoparts.sales',
]

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'autoparts.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests(sys.argv[1:] or APPS)
    sys.exit(bool(failures))
